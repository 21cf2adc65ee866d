# -*- coding: utf-8 -*-
"""
Rotas FastAPI para o CRUD de Turmas.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from gestao.auth import get_admin_or_gerente, get_empresa_id
from gestao.database import get_db
from gestao.models.funcionario import Funcionario
from gestao.models.turma import Turma
from gestao.models.usuario import Usuario
from gestao.schemas.turma import TurmaCreate, TurmaRead, TurmaUpdate

router = APIRouter(
    tags=["Turmas"],
    responses={404: {"description": "Turma não encontrada"}},
)


def _get_turma(db, empresa_id, turma_id):
    db_turma = db.query(Turma).filter(Turma.id == turma_id, Turma.empresa_id == empresa_id).first()
    if db_turma is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Turma não encontrada")
    return db_turma


def _validar_professor(db, empresa_id, professor_id):
    if professor_id is None:
        return
    professor = db.query(Funcionario).filter(
        Funcionario.id == professor_id, Funcionario.empresa_id == empresa_id
    ).first()
    if professor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Professor não encontrado")


@router.post("", response_model=TurmaRead, status_code=status.HTTP_201_CREATED)
def create_turma(turma: TurmaCreate, db: Session = Depends(get_db), empresa_id: int = Depends(get_empresa_id)):
    _validar_professor(db, empresa_id, turma.professor_id)
    db_turma = Turma(empresa_id=empresa_id, **turma.model_dump())
    db.add(db_turma)
    db.commit()
    db.refresh(db_turma)
    return db_turma


@router.get("", response_model=List[TurmaRead])
def read_turmas(
    skip: int = 0,
    limit: int = 100,
    modalidade: Optional[str] = None,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    query = db.query(Turma).filter(Turma.empresa_id == empresa_id)
    if modalidade:
        query = query.filter(Turma.modalidade.ilike(f"%{modalidade}%"))
    return query.order_by(Turma.nome).offset(skip).limit(limit).all()


@router.get("/{turma_id}", response_model=TurmaRead)
def read_turma(turma_id: int, db: Session = Depends(get_db), empresa_id: int = Depends(get_empresa_id)):
    return _get_turma(db, empresa_id, turma_id)


@router.put("/{turma_id}", response_model=TurmaRead)
def update_turma(
    turma_id: int,
    turma_update: TurmaUpdate,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    db_turma = _get_turma(db, empresa_id, turma_id)
    update_data = turma_update.model_dump(exclude_unset=True)
    if "professor_id" in update_data:
        _validar_professor(db, empresa_id, update_data["professor_id"])
    for key, value in update_data.items():
        setattr(db_turma, key, value)
    db.commit()
    db.refresh(db_turma)
    return db_turma


@router.delete("/{turma_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_turma(
    turma_id: int,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    db_turma = _get_turma(db, empresa_id, turma_id)
    if db_turma.matriculas:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Turma possui matrículas vinculadas.")
    db.delete(db_turma)
    db.commit()
    return None
