# -*- coding: utf-8 -*-
"""
Modelo SQLAlchemy para a entidade Funcionário (professores, recepção, gerência).
"""

from sqlalchemy import Column, Integer, String, Date, Text, Boolean, Numeric, ForeignKey

from gestao.database import Base


class Funcionario(Base):
    __tablename__ = "funcionarios"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False, index=True)

    nome = Column(String(100), nullable=False)
    cpf = Column(String(14), index=True, nullable=True)
    data_nascimento = Column(Date, nullable=True)
    telefone = Column(String(20), nullable=True)
    email = Column(String(100), nullable=True)
    cargo = Column(String(100), nullable=True)          # Professor, Recepcionista, Gerente...
    salario = Column(Numeric(10, 2), nullable=True)
    data_contratacao = Column(Date, nullable=True)
    observacoes = Column(Text, nullable=True)
    ativo = Column(Boolean, default=True, nullable=False)
