# -*- coding: utf-8 -*-
"""
Rotas FastAPI para as contas a pagar, incluindo parcelamento e totais por categoria.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from gestao.auth import get_admin_or_gerente
from gestao.dependencias import get_conta_pagar_service
from gestao.models.usuario import Usuario
from gestao.schemas.contas import (
    CancelamentoRequest, ContaPagarCreate, ContaPagarPaginated, ContaPagarParcelada, ContaPagarRead,
    ContaPagarUpdate, PagamentoCreate, RelatorioTotaisCategoria,
)
from gestao.services.contas_service import ContaPagarService

router = APIRouter(
    tags=["Contas a Pagar"],
    responses={404: {"description": "Não encontrado"}},
)


@router.post("", response_model=ContaPagarRead, status_code=status.HTTP_201_CREATED)
def criar_conta(dados: ContaPagarCreate, service: ContaPagarService = Depends(get_conta_pagar_service)):
    """
    Cria uma conta a pagar.
    """
    return service.criar(**dados.model_dump())


@router.post("/parcelado", response_model=List[ContaPagarRead], status_code=status.HTTP_201_CREATED)
def criar_parcelado(dados: ContaPagarParcelada, service: ContaPagarService = Depends(get_conta_pagar_service)):
    """
    Cria uma conta a pagar dividida em parcelas mensais.
    """
    return service.criar_parcelado(**dados.model_dump())


@router.get("", response_model=ContaPagarPaginated)
def listar_contas(
    skip: int = 0,
    limit: int = 20,
    status: Optional[str] = None,
    categoria: Optional[str] = None,
    funcionario_id: Optional[int] = None,
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    service: ContaPagarService = Depends(get_conta_pagar_service),
):
    """
    Lista as contas a pagar com filtros por status, categoria, funcionário e vencimento.
    """
    total, contas = service.listar(status, categoria, funcionario_id, data_inicio, data_fim, skip, limit)
    return {"total": total, "contas": contas}


@router.get("/relatorio-totais", response_model=RelatorioTotaisCategoria)
def relatorio_totais(
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    service: ContaPagarService = Depends(get_conta_pagar_service),
):
    """
    Totais pagos por categoria no período informado.
    """
    return service.relatorio_totais_por_categoria(data_inicio, data_fim)


@router.patch("/atualizar-vencidas")
def atualizar_vencidas(
    service: ContaPagarService = Depends(get_conta_pagar_service),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    """
    Marca como vencidas as contas pendentes com vencimento anterior a hoje.
    """
    return {"atualizadas": service.atualizar_vencidas()}


@router.get("/{conta_id}", response_model=ContaPagarRead)
def buscar_conta(conta_id: int, service: ContaPagarService = Depends(get_conta_pagar_service)):
    """
    Busca uma conta a pagar pelo ID.
    """
    return service.buscar_por_id(conta_id)


@router.put("/{conta_id}", response_model=ContaPagarRead)
def atualizar_conta(
    conta_id: int,
    dados: ContaPagarUpdate,
    service: ContaPagarService = Depends(get_conta_pagar_service),
):
    """
    Atualiza uma conta a pagar pendente ou vencida.
    """
    return service.atualizar(conta_id, dados.model_dump(exclude_unset=True))


@router.post("/{conta_id}/pagar", response_model=ContaPagarRead)
def registrar_pagamento(
    conta_id: int,
    dados: PagamentoCreate,
    service: ContaPagarService = Depends(get_conta_pagar_service),
):
    """
    Registra um pagamento (total ou parcial) e lança a saída no caixa aberto.
    """
    return service.registrar_pagamento(conta_id, **dados.model_dump())


@router.patch("/{conta_id}/cancelar", response_model=ContaPagarRead)
def cancelar_conta(
    conta_id: int,
    dados: CancelamentoRequest,
    service: ContaPagarService = Depends(get_conta_pagar_service),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    """
    Cancela uma conta a pagar em aberto. O motivo é obrigatório.
    """
    return service.cancelar(conta_id, dados.motivo)


@router.delete("/{conta_id}", status_code=status.HTTP_204_NO_CONTENT)
def deletar_conta(
    conta_id: int,
    service: ContaPagarService = Depends(get_conta_pagar_service),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    """
    Exclui uma conta a pagar sem nenhum pagamento registrado.
    """
    service.deletar(conta_id)
    return None
