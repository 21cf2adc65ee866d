# -*- coding: utf-8 -*-
"""
Schemas Pydantic para o caixa e seus movimentos.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from gestao.models.enums import StatusCaixa, TipoMovimento


class CaixaAbrir(BaseModel):
    valor_abertura: Decimal
    observacoes: Optional[str] = None


class CaixaFechar(BaseModel):
    valor_fechamento: Decimal
    observacoes: Optional[str] = None


class MovimentoCreate(BaseModel):
    tipo: str
    valor: Decimal
    descricao: str
    forma_pagamento: Optional[str] = None
    categoria: Optional[str] = None


# Sangria e suprimento: o responsável é o usuário autenticado
class MovimentoAvulso(BaseModel):
    valor: Decimal
    descricao: str


class MovimentoRead(BaseModel):
    id: int
    tipo: TipoMovimento
    valor: float
    descricao: str
    forma_pagamento: Optional[str] = None
    categoria: Optional[str] = None
    conta_receber_id: Optional[int] = None
    conta_pagar_id: Optional[int] = None
    data_hora: datetime

    class Config:
        from_attributes = True


class CaixaRead(BaseModel):
    id: int
    numero: str
    status: StatusCaixa
    data_abertura: datetime
    data_fechamento: Optional[datetime] = None
    usuario_abertura: str
    usuario_fechamento: Optional[str] = None
    valor_abertura: float
    total_entradas: float
    total_saidas: float
    saldo_disponivel: float
    valor_fechamento: Optional[float] = None
    saldo_final: Optional[float] = None
    diferenca: Optional[float] = None
    observacoes: Optional[str] = None
    movimentos: List[MovimentoRead] = []

    class Config:
        from_attributes = True


class CaixaPaginated(BaseModel):
    total: int
    caixas: List[CaixaRead]
