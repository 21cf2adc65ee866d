# -*- coding: utf-8 -*-
"""
Schemas Pydantic para a entidade Desconto.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from gestao.models.enums import StatusCadastro, TipoDesconto


class DescontoBase(BaseModel):
    descricao: str = Field(..., max_length=100)
    tipo: TipoDesconto
    valor: Decimal = Field(..., ge=0)


class DescontoCreate(DescontoBase):
    status: StatusCadastro = StatusCadastro.ATIVO


class DescontoUpdate(BaseModel):
    descricao: Optional[str] = Field(None, max_length=100)
    tipo: Optional[TipoDesconto] = None
    valor: Optional[Decimal] = Field(None, ge=0)
    status: Optional[StatusCadastro] = None


class DescontoRead(DescontoBase):
    id: int
    valor: float
    status: StatusCadastro

    class Config:
        from_attributes = True
