# -*- coding: utf-8 -*-
"""
Modelos SQLAlchemy do caixa (sessões de abertura/fechamento) e seus movimentos.

Apenas um caixa com status ABERTO pode existir por empresa; o índice parcial
`uq_caixa_aberto_empresa` garante isso no banco.
"""
from sqlalchemy import (
    Column, Integer, String, DateTime, Numeric, Text, ForeignKey, Index,
    UniqueConstraint, text,
)
from sqlalchemy.orm import relationship

from gestao.database import Base
from gestao.models.enums import StatusCaixa, TipoMovimento, enum_coluna


class Caixa(Base):
    __tablename__ = "caixas"
    __table_args__ = (
        UniqueConstraint("empresa_id", "numero", name="uq_caixa_numero_empresa"),
        Index(
            "uq_caixa_aberto_empresa",
            "empresa_id",
            unique=True,
            sqlite_where=text("status = 'ABERTO'"),
            postgresql_where=text("status = 'ABERTO'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False, index=True)
    numero = Column(String(10), nullable=False)

    data_abertura = Column(DateTime, nullable=False)
    data_fechamento = Column(DateTime, nullable=True)
    usuario_abertura = Column(String(100), nullable=False)
    usuario_fechamento = Column(String(100), nullable=True)

    valor_abertura = Column(Numeric(10, 2), nullable=False, default=0)
    total_entradas = Column(Numeric(10, 2), nullable=False, default=0)
    total_saidas = Column(Numeric(10, 2), nullable=False, default=0)
    valor_fechamento = Column(Numeric(10, 2), nullable=True)   # contagem física informada
    saldo_final = Column(Numeric(10, 2), nullable=True)
    diferenca = Column(Numeric(10, 2), nullable=True)          # sobra (+) ou falta (-)

    status = Column(enum_coluna(StatusCaixa), nullable=False, default=StatusCaixa.ABERTO)
    observacoes = Column(Text, nullable=True)

    movimentos = relationship(
        "MovimentoCaixa",
        back_populates="caixa",
        cascade="all, delete-orphan",
        order_by="MovimentoCaixa.data_hora",
    )

    @property
    def saldo_disponivel(self):
        return self.valor_abertura + self.total_entradas - self.total_saidas


class MovimentoCaixa(Base):
    __tablename__ = "movimentos_caixa"

    id = Column(Integer, primary_key=True, index=True)
    caixa_id = Column(Integer, ForeignKey("caixas.id"), nullable=False, index=True)

    tipo = Column(enum_coluna(TipoMovimento), nullable=False)
    valor = Column(Numeric(10, 2), nullable=False)
    descricao = Column(String(255), nullable=False)
    forma_pagamento = Column(String(30), nullable=True)  # forma de pagamento, SANGRIA ou SUPRIMENTO
    categoria = Column(String(50), nullable=True)
    conta_receber_id = Column(Integer, ForeignKey("contas_receber.id"), nullable=True, index=True)
    conta_pagar_id = Column(Integer, ForeignKey("contas_pagar.id"), nullable=True, index=True)
    data_hora = Column(DateTime, nullable=False)

    caixa = relationship("Caixa", back_populates="movimentos")
