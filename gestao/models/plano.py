# -*- coding: utf-8 -*-
"""
Modelo SQLAlchemy para a entidade Plano (modelo de cobrança).
"""
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, UniqueConstraint

from gestao.database import Base
from gestao.models.enums import Periodicidade, StatusCadastro, TipoCobranca, enum_coluna


class Plano(Base):
    __tablename__ = 'planos'
    __table_args__ = (UniqueConstraint("empresa_id", "codigo", name="uq_plano_codigo_empresa"),)

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False, index=True)

    codigo = Column(String(10), nullable=False)
    nome = Column(String(100), nullable=False)
    descricao = Column(String(255), nullable=True)
    periodicidade = Column(enum_coluna(Periodicidade), nullable=False, default=Periodicidade.MENSAL)
    tipo_cobranca = Column(enum_coluna(TipoCobranca), nullable=False, default=TipoCobranca.RECORRENTE)
    valor = Column(Numeric(10, 2), nullable=False)
    # Só usados nas periodicidades personalizadas MESES / DIAS
    numero_meses = Column(Integer, nullable=True)
    numero_dias = Column(Integer, nullable=True)
    status = Column(enum_coluna(StatusCadastro), nullable=False, default=StatusCadastro.ATIVO)

    @property
    def recorrente(self):
        return self.tipo_cobranca == TipoCobranca.RECORRENTE
