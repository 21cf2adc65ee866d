# -*- coding: utf-8 -*-
"""
Schemas Pydantic para a entidade Plano.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from gestao.models.enums import Periodicidade, StatusCadastro, TipoCobranca


# Schema base para Plano
class PlanoBase(BaseModel):
    nome: str = Field(..., max_length=100)
    descricao: Optional[str] = Field(None, max_length=255)
    periodicidade: Periodicidade
    tipo_cobranca: TipoCobranca
    valor: Decimal = Field(..., gt=0)
    numero_meses: Optional[int] = Field(None, gt=0)
    numero_dias: Optional[int] = Field(None, gt=0)


class PlanoCreate(PlanoBase):
    codigo: Optional[str] = Field(None, max_length=10)  # gerado automaticamente quando omitido
    status: StatusCadastro = StatusCadastro.ATIVO


class PlanoUpdate(BaseModel):
    nome: Optional[str] = Field(None, max_length=100)
    descricao: Optional[str] = Field(None, max_length=255)
    periodicidade: Optional[Periodicidade] = None
    tipo_cobranca: Optional[TipoCobranca] = None
    valor: Optional[Decimal] = Field(None, gt=0)
    numero_meses: Optional[int] = Field(None, gt=0)
    numero_dias: Optional[int] = Field(None, gt=0)
    status: Optional[StatusCadastro] = None


class PlanoRead(PlanoBase):
    id: int
    codigo: str
    valor: float
    status: StatusCadastro

    class Config:
        from_attributes = True
