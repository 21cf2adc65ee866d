# -*- coding: utf-8 -*-
"""
Rotas FastAPI para o CRUD de Descontos.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gestao.auth import get_admin_or_gerente, get_empresa_id
from gestao.database import get_db
from gestao.models.desconto import Desconto
from gestao.models.enums import TipoDesconto
from gestao.models.usuario import Usuario
from gestao.schemas.desconto import DescontoCreate, DescontoRead, DescontoUpdate

router = APIRouter(
    tags=["Descontos"],
    responses={404: {"description": "Desconto não encontrado"}},
)


def _validar_percentual(tipo, valor):
    if tipo == TipoDesconto.PERCENTUAL and valor is not None and valor > 100:
        raise HTTPException(status_code=400, detail="Desconto percentual não pode ser maior que 100%")


def _get_desconto(db, empresa_id, desconto_id):
    db_desconto = db.query(Desconto).filter(Desconto.id == desconto_id, Desconto.empresa_id == empresa_id).first()
    if db_desconto is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Desconto não encontrado")
    return db_desconto


@router.post("", response_model=DescontoRead, status_code=status.HTTP_201_CREATED)
def create_desconto(desconto: DescontoCreate, db: Session = Depends(get_db), empresa_id: int = Depends(get_empresa_id)):
    _validar_percentual(desconto.tipo, desconto.valor)
    try:
        db_desconto = Desconto(empresa_id=empresa_id, **desconto.model_dump())
        db.add(db_desconto)
        db.commit()
        db.refresh(db_desconto)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Já existe um desconto com esta descrição.")
    return db_desconto


@router.get("", response_model=List[DescontoRead])
def read_descontos(
    skip: int = 0,
    limit: int = 100,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    query = db.query(Desconto).filter(Desconto.empresa_id == empresa_id)
    if status:
        query = query.filter(Desconto.status == status)
    return query.order_by(Desconto.descricao).offset(skip).limit(limit).all()


@router.get("/{desconto_id}", response_model=DescontoRead)
def read_desconto(desconto_id: int, db: Session = Depends(get_db), empresa_id: int = Depends(get_empresa_id)):
    return _get_desconto(db, empresa_id, desconto_id)


@router.put("/{desconto_id}", response_model=DescontoRead)
def update_desconto(
    desconto_id: int,
    desconto_update: DescontoUpdate,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    db_desconto = _get_desconto(db, empresa_id, desconto_id)
    update_data = desconto_update.model_dump(exclude_unset=True)
    _validar_percentual(update_data.get("tipo", db_desconto.tipo), update_data.get("valor", db_desconto.valor))

    try:
        for key, value in update_data.items():
            setattr(db_desconto, key, value)
        db.commit()
        db.refresh(db_desconto)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Já existe um desconto com esta descrição.")
    return db_desconto


@router.delete("/{desconto_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_desconto(
    desconto_id: int,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    db_desconto = _get_desconto(db, empresa_id, desconto_id)
    try:
        db.delete(db_desconto)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Desconto em uso; inative-o.")
    return None
