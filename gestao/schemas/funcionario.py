# -*- coding: utf-8 -*-
"""
Schemas Pydantic para a entidade Funcionário.
"""
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class FuncionarioBase(BaseModel):
    nome: str = Field(..., max_length=100)
    cpf: Optional[str] = Field(None, max_length=14)
    data_nascimento: Optional[date] = None
    telefone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    cargo: Optional[str] = Field(None, max_length=100)
    salario: Optional[Decimal] = Field(None, ge=0)
    data_contratacao: Optional[date] = None
    observacoes: Optional[str] = None


class FuncionarioCreate(FuncionarioBase):
    pass


class FuncionarioUpdate(BaseModel):
    nome: Optional[str] = Field(None, max_length=100)
    cpf: Optional[str] = Field(None, max_length=14)
    data_nascimento: Optional[date] = None
    telefone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    cargo: Optional[str] = Field(None, max_length=100)
    salario: Optional[Decimal] = Field(None, ge=0)
    data_contratacao: Optional[date] = None
    observacoes: Optional[str] = None
    ativo: Optional[bool] = None


class FuncionarioRead(FuncionarioBase):
    id: int
    salario: Optional[float] = None
    ativo: bool

    class Config:
        from_attributes = True
