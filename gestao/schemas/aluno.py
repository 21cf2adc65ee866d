# -*- coding: utf-8 -*-
"""
Schemas Pydantic para a entidade Aluno.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class AlunoBase(BaseModel):
    nome: str = Field(..., max_length=100)
    data_nascimento: Optional[date] = None
    cpf: Optional[str] = Field(None, max_length=14)
    telefone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    endereco: Optional[str] = Field(None, max_length=255)
    observacoes: Optional[str] = Field(None, max_length=255)


class AlunoCreate(AlunoBase):
    pass


class AlunoUpdate(BaseModel):
    nome: Optional[str] = Field(None, max_length=100)
    data_nascimento: Optional[date] = None
    cpf: Optional[str] = Field(None, max_length=14)
    telefone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    endereco: Optional[str] = Field(None, max_length=255)
    observacoes: Optional[str] = Field(None, max_length=255)
    ativo: Optional[bool] = None


class AlunoRead(AlunoBase):
    id: int
    ativo: bool
    data_cadastro: Optional[datetime] = None

    class Config:
        from_attributes = True


class AlunoPaginated(BaseModel):
    total: int
    alunos: List[AlunoRead]
