# -*- coding: utf-8 -*-
"""
Schemas Pydantic para a entidade Turma.
"""
from typing import Optional

from pydantic import BaseModel, Field


class TurmaBase(BaseModel):
    nome: str = Field(..., max_length=100)
    modalidade: str = Field(..., max_length=50)
    horario: Optional[str] = Field(None, max_length=50)
    dias_semana: Optional[str] = Field(None, max_length=100)
    professor_id: Optional[int] = None
    nivel: Optional[str] = Field(None, max_length=50)
    capacidade_maxima: Optional[int] = Field(None, gt=0)
    descricao: Optional[str] = Field(None, max_length=255)


class TurmaCreate(TurmaBase):
    pass


class TurmaUpdate(BaseModel):
    nome: Optional[str] = Field(None, max_length=100)
    modalidade: Optional[str] = Field(None, max_length=50)
    horario: Optional[str] = Field(None, max_length=50)
    dias_semana: Optional[str] = Field(None, max_length=100)
    professor_id: Optional[int] = None
    nivel: Optional[str] = Field(None, max_length=50)
    capacidade_maxima: Optional[int] = Field(None, gt=0)
    descricao: Optional[str] = Field(None, max_length=255)
    ativa: Optional[bool] = None


class TurmaRead(TurmaBase):
    id: int
    ativa: bool

    class Config:
        from_attributes = True
