# -*- coding: utf-8 -*-
"""
Rotas FastAPI para o CRUD de Funcionários.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from gestao.auth import get_admin_or_gerente, get_empresa_id
from gestao.database import get_db
from gestao.models.contas import ContaPagar
from gestao.models.funcionario import Funcionario
from gestao.models.usuario import Usuario
from gestao.schemas.funcionario import FuncionarioCreate, FuncionarioRead, FuncionarioUpdate

router = APIRouter(
    tags=["Funcionários"],
    responses={404: {"description": "Funcionário não encontrado"}},
)


def _get_funcionario(db, empresa_id, funcionario_id):
    db_funcionario = db.query(Funcionario).filter(
        Funcionario.id == funcionario_id, Funcionario.empresa_id == empresa_id
    ).first()
    if db_funcionario is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Funcionário não encontrado")
    return db_funcionario


@router.post("", response_model=FuncionarioRead, status_code=status.HTTP_201_CREATED)
def create_funcionario(
    funcionario: FuncionarioCreate,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    db_funcionario = Funcionario(empresa_id=empresa_id, **funcionario.model_dump())
    db.add(db_funcionario)
    db.commit()
    db.refresh(db_funcionario)
    return db_funcionario


@router.get("", response_model=List[FuncionarioRead])
def read_funcionarios(
    skip: int = 0,
    limit: int = 100,
    nome: Optional[str] = None,
    ativo: Optional[bool] = None,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    query = db.query(Funcionario).filter(Funcionario.empresa_id == empresa_id)
    if nome:
        query = query.filter(Funcionario.nome.ilike(f"%{nome}%"))
    if ativo is not None:
        query = query.filter(Funcionario.ativo == ativo)
    return query.order_by(Funcionario.nome).offset(skip).limit(limit).all()


@router.get("/{funcionario_id}", response_model=FuncionarioRead)
def read_funcionario(funcionario_id: int, db: Session = Depends(get_db), empresa_id: int = Depends(get_empresa_id)):
    return _get_funcionario(db, empresa_id, funcionario_id)


@router.put("/{funcionario_id}", response_model=FuncionarioRead)
def update_funcionario(
    funcionario_id: int,
    funcionario_update: FuncionarioUpdate,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    db_funcionario = _get_funcionario(db, empresa_id, funcionario_id)
    for key, value in funcionario_update.model_dump(exclude_unset=True).items():
        setattr(db_funcionario, key, value)
    db.commit()
    db.refresh(db_funcionario)
    return db_funcionario


@router.delete("/{funcionario_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_funcionario(
    funcionario_id: int,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    db_funcionario = _get_funcionario(db, empresa_id, funcionario_id)
    if db.query(ContaPagar).filter(ContaPagar.funcionario_id == funcionario_id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Funcionário possui contas a pagar; inative-o em vez de excluir."
        )
    db.delete(db_funcionario)
    db.commit()
    return None
