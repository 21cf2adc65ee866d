# -*- coding: utf-8 -*-
"""
Schemas Pydantic para a entidade Matrícula.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from gestao.models.enums import FormaPagamento, SituacaoMatricula
from gestao.schemas.contas import ContaReceberRead


class MatriculaCreate(BaseModel):
    aluno_id: int
    plano_id: int
    data_inicio: date
    turma_id: Optional[int] = None
    desconto_id: Optional[int] = None
    dia_vencimento: Optional[int] = None
    forma_pagamento: Optional[str] = None
    parcelamento: int = Field(1, ge=1)
    observacoes: Optional[str] = None


class MatriculaUpdate(BaseModel):
    plano_id: Optional[int] = None
    turma_id: Optional[int] = None
    desconto_id: Optional[int] = None
    data_inicio: Optional[date] = None
    dia_vencimento: Optional[int] = None
    forma_pagamento: Optional[str] = None
    parcelamento: Optional[int] = Field(None, ge=1)
    observacoes: Optional[str] = None


class InativacaoRequest(BaseModel):
    motivo: str


class MatriculaRead(BaseModel):
    id: int
    codigo: str
    aluno_id: int
    plano_id: int
    turma_id: Optional[int] = None
    desconto_id: Optional[int] = None
    data_inicio: date
    data_fim: date
    dia_vencimento: Optional[int] = None
    valor_matricula: float
    valor_desconto: float
    valor_final: float
    situacao: SituacaoMatricula
    motivo_inativacao: Optional[str] = None
    forma_pagamento: Optional[FormaPagamento] = None
    parcelamento: int
    observacoes: Optional[str] = None

    class Config:
        from_attributes = True


class MatriculaCriada(BaseModel):
    matricula: MatriculaRead
    primeira_conta: ContaReceberRead


class MatriculaPaginated(BaseModel):
    total: int
    matriculas: List[MatriculaRead]
