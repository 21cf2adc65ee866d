# -*- coding: utf-8 -*-
"""
Modelo SQLAlchemy para a entidade Turma.
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from gestao.database import Base


class Turma(Base):
    __tablename__ = "turmas"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False, index=True)

    nome = Column(String(100), nullable=False)
    modalidade = Column(String(50), nullable=False)
    horario = Column(String(50), nullable=True)
    dias_semana = Column(String(100), nullable=True)
    professor_id = Column(Integer, ForeignKey("funcionarios.id"), nullable=True)
    nivel = Column(String(50), nullable=True)
    capacidade_maxima = Column(Integer, nullable=True)
    descricao = Column(String(255), nullable=True)
    ativa = Column(Boolean, default=True, nullable=False)

    professor = relationship("Funcionario")
    matriculas = relationship("Matricula", back_populates="turma")
