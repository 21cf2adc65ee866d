# -*- coding: utf-8 -*-
"""
Modelo SQLAlchemy para a entidade Empresa (inquilino do sistema).
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func

from gestao.database import Base


class Empresa(Base):
    __tablename__ = "empresas"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(150), nullable=False)
    cnpj = Column(String(18), unique=True, nullable=True)
    ativa = Column(Boolean, default=True, nullable=False)
    data_cadastro = Column(DateTime, server_default=func.now())
