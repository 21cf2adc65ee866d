# gestao/models/matricula.py
from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, Text, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship

from gestao.database import Base
from gestao.models.enums import FormaPagamento, SituacaoMatricula, enum_coluna


class Matricula(Base):
    __tablename__ = "matriculas"
    __table_args__ = (UniqueConstraint("empresa_id", "codigo", name="uq_matricula_codigo_empresa"),)

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False, index=True)
    codigo = Column(String(10), nullable=False)

    aluno_id = Column(Integer, ForeignKey("alunos.id"), nullable=False, index=True)
    plano_id = Column(Integer, ForeignKey("planos.id"), nullable=False)
    turma_id = Column(Integer, ForeignKey("turmas.id"), nullable=True)
    desconto_id = Column(Integer, ForeignKey("descontos.id"), nullable=True)

    data_inicio = Column(Date, nullable=False)
    data_fim = Column(Date, nullable=False)
    dia_vencimento = Column(Integer, nullable=True)  # só para planos recorrentes

    # Valores congelados no momento da matrícula
    valor_matricula = Column(Numeric(10, 2), nullable=False)
    valor_desconto = Column(Numeric(10, 2), nullable=False, default=0)
    valor_final = Column(Numeric(10, 2), nullable=False)

    situacao = Column(enum_coluna(SituacaoMatricula), nullable=False, default=SituacaoMatricula.ATIVA)
    motivo_inativacao = Column(String(255), nullable=True)
    forma_pagamento = Column(enum_coluna(FormaPagamento), nullable=True)
    parcelamento = Column(Integer, nullable=False, default=1)
    observacoes = Column(Text, nullable=True)
    criado_em = Column(DateTime, server_default=func.now())

    aluno = relationship("Aluno", back_populates="matriculas")
    plano = relationship("Plano")
    turma = relationship("Turma", back_populates="matriculas")
    desconto = relationship("Desconto")

    contas_receber = relationship("ContaReceber", back_populates="matricula")
    historico = relationship("HistoricoMatricula", back_populates="matricula", cascade="all, delete-orphan")
