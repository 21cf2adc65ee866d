# -*- coding: utf-8 -*-
"""
Rotas FastAPI para o CRUD de Planos.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from gestao.auth import get_admin_or_gerente, get_empresa_id
from gestao.database import get_db
from gestao.models.enums import Periodicidade, TipoCobranca
from gestao.models.plano import Plano
from gestao.models.usuario import Usuario
from gestao.schemas.plano import PlanoCreate, PlanoRead, PlanoUpdate
from gestao.services.sequencias import proximo_numero

router = APIRouter(
    tags=["Planos"],
    responses={404: {"description": "Plano não encontrado"}},
)


def validar_plano(dados: dict):
    """Regras de consistência entre periodicidade, tipo de cobrança e duração."""
    if dados.get("tipo_cobranca") == TipoCobranca.UNICA and dados.get("periodicidade") == Periodicidade.MENSAL:
        raise HTTPException(status_code=400, detail="Plano com cobrança única não pode ter periodicidade MENSAL")
    if dados.get("periodicidade") == Periodicidade.MESES and not dados.get("numero_meses"):
        raise HTTPException(status_code=400, detail="Número de meses é obrigatório para periodicidade MESES")
    if dados.get("periodicidade") == Periodicidade.DIAS and not dados.get("numero_dias"):
        raise HTTPException(status_code=400, detail="Número de dias é obrigatório para periodicidade DIAS")

    # Limpa as durações que não se aplicam à periodicidade
    if dados.get("periodicidade") != Periodicidade.MESES:
        dados["numero_meses"] = None
    if dados.get("periodicidade") != Periodicidade.DIAS:
        dados["numero_dias"] = None
    return dados


def _get_plano(db, empresa_id, plano_id):
    db_plano = db.query(Plano).filter(Plano.id == plano_id, Plano.empresa_id == empresa_id).first()
    if db_plano is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plano não encontrado")
    return db_plano


# --- CRUD Endpoints ---

@router.post("", response_model=PlanoRead, status_code=status.HTTP_201_CREATED)
def create_plano(plano: PlanoCreate, db: Session = Depends(get_db), empresa_id: int = Depends(get_empresa_id)):
    """
    Cria um novo plano. O código (P0001...) é gerado quando não informado.
    """
    dados = validar_plano(plano.model_dump())
    try:
        if not dados.get("codigo"):
            dados["codigo"] = proximo_numero(db, empresa_id, "P", largura=4)
        db_plano = Plano(empresa_id=empresa_id, **dados)
        db.add(db_plano)
        db.commit()
        db.refresh(db_plano)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Erro ao criar plano. Verifique se o código já existe."
        )
    return db_plano


@router.get("", response_model=List[PlanoRead])
def read_planos(
    skip: int = 0,
    limit: int = 100,
    nome: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    query = db.query(Plano).filter(Plano.empresa_id == empresa_id)
    if nome:
        query = query.filter(Plano.nome.ilike(f"%{nome}%"))
    if status:
        query = query.filter(Plano.status == status)

    return query.order_by(Plano.valor).offset(skip).limit(limit).all()


@router.get("/{plano_id}", response_model=PlanoRead)
def read_plano(plano_id: int, db: Session = Depends(get_db), empresa_id: int = Depends(get_empresa_id)):
    return _get_plano(db, empresa_id, plano_id)


@router.put("/{plano_id}", response_model=PlanoRead)
def update_plano(
    plano_id: int,
    plano_update: PlanoUpdate,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
):
    db_plano = _get_plano(db, empresa_id, plano_id)

    update_data = plano_update.model_dump(exclude_unset=True)
    atual = {
        "periodicidade": db_plano.periodicidade,
        "tipo_cobranca": db_plano.tipo_cobranca,
        "numero_meses": db_plano.numero_meses,
        "numero_dias": db_plano.numero_dias,
    }
    atual.update(update_data)
    update_data.update(validar_plano(atual))

    try:
        for key, value in update_data.items():
            setattr(db_plano, key, value)
        db.commit()
        db.refresh(db_plano)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Erro de integridade ao atualizar o plano.")

    return db_plano


@router.delete("/{plano_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plano(
    plano_id: int,
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    db_plano = _get_plano(db, empresa_id, plano_id)
    try:
        db.delete(db_plano)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Plano em uso por matrículas ou contas; inative-o.")
    return None
