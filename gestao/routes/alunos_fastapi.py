# -*- coding: utf-8 -*-
"""
Rotas FastAPI para o CRUD de Alunos.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gestao.auth import get_admin_or_gerente, get_empresa_id
from gestao.database import get_db
from gestao.models.aluno import Aluno
from gestao.models.usuario import Usuario
from gestao.schemas.aluno import AlunoCreate, AlunoPaginated, AlunoRead, AlunoUpdate

router = APIRouter(
    tags=["Alunos"],
    responses={404: {"description": "Aluno não encontrado"}},
)


def _get_aluno(db, empresa_id, aluno_id):
    db_aluno = db.query(Aluno).filter(Aluno.id == aluno_id, Aluno.empresa_id == empresa_id).first()
    if db_aluno is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Aluno não encontrado")
    return db_aluno


@router.post("", response_model=AlunoRead, status_code=status.HTTP_201_CREATED)
def create_aluno(aluno: AlunoCreate, db: Session = Depends(get_db), empresa_id: int = Depends(get_empresa_id)):
    try:
        db_aluno = Aluno(empresa_id=empresa_id, **aluno.model_dump())
        db.add(db_aluno)
        db.commit()
        db.refresh(db_aluno)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Já existe um aluno com este CPF.")
    return db_aluno


@router.get("", response_model=AlunoPaginated)
def read_alunos(
    skip: int = 0,
    limit: int = 20,
    search: Optional[str] = None,
    ativo: Optional[bool] = None,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    """
    Lista alunos com busca por nome/CPF e paginação.
    """
    query = db.query(Aluno).filter(Aluno.empresa_id == empresa_id)
    if search:
        query = query.filter(Aluno.nome.ilike(f"%{search}%") | Aluno.cpf.ilike(f"%{search}%"))
    if ativo is not None:
        query = query.filter(Aluno.ativo == ativo)

    total = query.count()
    alunos = query.order_by(Aluno.nome).offset(skip).limit(limit).all()
    return {"total": total, "alunos": alunos}


@router.get("/{aluno_id}", response_model=AlunoRead)
def read_aluno(aluno_id: int, db: Session = Depends(get_db), empresa_id: int = Depends(get_empresa_id)):
    return _get_aluno(db, empresa_id, aluno_id)


@router.put("/{aluno_id}", response_model=AlunoRead)
def update_aluno(
    aluno_id: int,
    aluno_update: AlunoUpdate,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    db_aluno = _get_aluno(db, empresa_id, aluno_id)
    update_data = aluno_update.model_dump(exclude_unset=True)
    try:
        for key, value in update_data.items():
            setattr(db_aluno, key, value)
        db.commit()
        db.refresh(db_aluno)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Já existe um aluno com este CPF.")
    return db_aluno


@router.delete("/{aluno_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_aluno(
    aluno_id: int,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    db_aluno = _get_aluno(db, empresa_id, aluno_id)
    if db_aluno.matriculas or db_aluno.contas_receber:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Aluno possui matrículas ou contas; inative-o em vez de excluir."
        )
    db.delete(db_aluno)
    db.commit()
    return None
