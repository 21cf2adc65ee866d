# -*- coding: utf-8 -*-
"""
Rotas FastAPI para as contas a receber.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status

from gestao.auth import get_admin_or_gerente
from gestao.dependencias import get_conta_receber_service
from gestao.models.usuario import Usuario
from gestao.schemas.contas import (
    CancelamentoRequest, ContaReceberCreate, ContaReceberPaginated, ContaReceberRead,
    ContaReceberUpdate, PagamentoCreate,
)
from gestao.services.contas_service import ContaReceberService

router = APIRouter(
    tags=["Contas a Receber"],
    responses={404: {"description": "Não encontrado"}},
)


@router.post("", response_model=ContaReceberRead, status_code=status.HTTP_201_CREATED)
def criar_conta(dados: ContaReceberCreate, service: ContaReceberService = Depends(get_conta_receber_service)):
    """
    Cria uma conta a receber, a partir de valores ou de um plano com desconto.
    """
    return service.criar(**dados.model_dump())


@router.get("", response_model=ContaReceberPaginated)
def listar_contas(
    skip: int = 0,
    limit: int = 20,
    status: Optional[str] = None,
    aluno_id: Optional[int] = None,
    matricula_id: Optional[int] = None,
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    service: ContaReceberService = Depends(get_conta_receber_service),
):
    """
    Lista as contas a receber com filtros por status, aluno, matrícula e vencimento.
    """
    total, contas = service.listar(status, aluno_id, matricula_id, data_inicio, data_fim, skip, limit)
    return {"total": total, "contas": contas}


@router.patch("/atualizar-vencidas")
def atualizar_vencidas(
    service: ContaReceberService = Depends(get_conta_receber_service),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    """
    Marca como vencidas as contas pendentes com vencimento anterior a hoje.
    """
    return {"atualizadas": service.atualizar_vencidas()}


@router.get("/{conta_id}", response_model=ContaReceberRead)
def buscar_conta(conta_id: int, service: ContaReceberService = Depends(get_conta_receber_service)):
    """
    Busca uma conta a receber pelo ID.
    """
    return service.buscar_por_id(conta_id)


@router.put("/{conta_id}", response_model=ContaReceberRead)
def atualizar_conta(
    conta_id: int,
    dados: ContaReceberUpdate,
    service: ContaReceberService = Depends(get_conta_receber_service),
):
    """
    Atualiza uma conta a receber pendente ou vencida.
    """
    return service.atualizar(conta_id, dados.model_dump(exclude_unset=True))


@router.post("/{conta_id}/pagar", response_model=ContaReceberRead)
def registrar_pagamento(
    conta_id: int,
    dados: PagamentoCreate,
    service: ContaReceberService = Depends(get_conta_receber_service),
):
    """
    Registra um pagamento (total ou parcial) e lança a entrada no caixa aberto.
    """
    return service.registrar_pagamento(conta_id, **dados.model_dump())


@router.patch("/{conta_id}/cancelar", response_model=ContaReceberRead)
def cancelar_conta(
    conta_id: int,
    dados: CancelamentoRequest,
    service: ContaReceberService = Depends(get_conta_receber_service),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    """
    Cancela uma conta a receber em aberto. O motivo é obrigatório.
    """
    return service.cancelar(conta_id, dados.motivo)
