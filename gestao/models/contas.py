# -*- coding: utf-8 -*-
"""
Modelos SQLAlchemy das contas a receber e a pagar.

As duas variantes compartilham os mesmos campos de valores e o mesmo ciclo de vida:
PENDENTE -> PAGO (final), PENDENTE <-> VENCIDO, PENDENTE|VENCIDO -> CANCELADO (final).
"""
from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Numeric, Text, ForeignKey, Index,
    UniqueConstraint, func, text,
)
from sqlalchemy.orm import relationship

from gestao.database import Base
from gestao.models.enums import CategoriaContaPagar, FormaPagamento, StatusConta, enum_coluna


class ValoresContaMixin:
    numero = Column(String(10), nullable=False)
    descricao = Column(String(255), nullable=True)

    valor_original = Column(Numeric(10, 2), nullable=False)
    valor_desconto = Column(Numeric(10, 2), nullable=False, default=0)
    valor_juros = Column(Numeric(10, 2), nullable=False, default=0)
    valor_multa = Column(Numeric(10, 2), nullable=False, default=0)
    valor_final = Column(Numeric(10, 2), nullable=False)
    valor_pago = Column(Numeric(10, 2), nullable=False, default=0)
    valor_restante = Column(Numeric(10, 2), nullable=False)

    data_vencimento = Column(Date, nullable=False, index=True)
    data_pagamento = Column(Date, nullable=True)
    forma_pagamento = Column(enum_coluna(FormaPagamento), nullable=True)
    status = Column(enum_coluna(StatusConta), nullable=False, default=StatusConta.PENDENTE, index=True)

    numero_parcela = Column(Integer, nullable=True)
    total_parcelas = Column(Integer, nullable=True)
    observacoes = Column(Text, nullable=True)

    criado_em = Column(DateTime, server_default=func.now())
    atualizado_em = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def encerrada(self):
        return self.status in (StatusConta.PAGO, StatusConta.CANCELADO)

    def anotar(self, texto):
        self.observacoes = f"{self.observacoes or ''}\n{texto}".strip()


class ContaReceber(ValoresContaMixin, Base):
    __tablename__ = "contas_receber"
    __table_args__ = (
        UniqueConstraint("empresa_id", "numero", name="uq_conta_receber_numero_empresa"),
        # Uma única cobrança não cancelada por matrícula e competência
        Index(
            "uq_conta_receber_matricula_competencia",
            "matricula_id", "competencia",
            unique=True,
            sqlite_where=text("status <> 'CANCELADO'"),
            postgresql_where=text("status <> 'CANCELADO'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False, index=True)
    categoria = Column(String(30), nullable=False, default="MENSALIDADE")

    aluno_id = Column(Integer, ForeignKey("alunos.id"), nullable=False, index=True)
    plano_id = Column(Integer, ForeignKey("planos.id"), nullable=True)
    desconto_id = Column(Integer, ForeignKey("descontos.id"), nullable=True)
    matricula_id = Column(Integer, ForeignKey("matriculas.id"), nullable=True, index=True)
    competencia = Column(String(7), nullable=True)  # MM/YYYY

    aluno = relationship("Aluno", back_populates="contas_receber")
    plano = relationship("Plano")
    matricula = relationship("Matricula", back_populates="contas_receber")


class ContaPagar(ValoresContaMixin, Base):
    __tablename__ = "contas_pagar"
    __table_args__ = (UniqueConstraint("empresa_id", "numero", name="uq_conta_pagar_numero_empresa"),)

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False, index=True)
    categoria = Column(enum_coluna(CategoriaContaPagar), nullable=False)

    fornecedor_nome = Column(String(150), nullable=True)
    fornecedor_doc = Column(String(20), nullable=True)
    funcionario_id = Column(Integer, ForeignKey("funcionarios.id"), nullable=True, index=True)
    documento = Column(String(50), nullable=True)  # nota fiscal, boleto...

    funcionario = relationship("Funcionario")
