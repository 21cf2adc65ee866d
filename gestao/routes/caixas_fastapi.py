# -*- coding: utf-8 -*-
"""
Rotas FastAPI do caixa: abertura, movimentos, sangria/suprimento, fechamento e relatório.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status

from gestao.auth import get_admin_or_gerente, get_current_active_user
from gestao.dependencias import get_caixa_service
from gestao.models.usuario import Usuario
from gestao.schemas.caixa import (
    CaixaAbrir, CaixaFechar, CaixaPaginated, CaixaRead, MovimentoAvulso, MovimentoCreate, MovimentoRead,
)
from gestao.services.caixa_service import CaixaService

router = APIRouter(
    tags=["Caixa"],
    responses={404: {"description": "Não encontrado"}},
)


@router.post("/abrir", response_model=CaixaRead, status_code=status.HTTP_201_CREATED)
def abrir_caixa(
    dados: CaixaAbrir,
    service: CaixaService = Depends(get_caixa_service),
    current_user: Usuario = Depends(get_current_active_user),
):
    """
    Abre um novo caixa para a empresa. Só pode haver um caixa aberto por vez.
    """
    return service.abrir(dados.valor_abertura, current_user.username, dados.observacoes)


@router.get("/aberto", response_model=CaixaRead)
def caixa_aberto(service: CaixaService = Depends(get_caixa_service)):
    """
    Retorna o caixa atualmente aberto.
    """
    return service.buscar_aberto()


@router.get("", response_model=CaixaPaginated)
def listar_caixas(
    skip: int = 0,
    limit: int = 20,
    status: Optional[str] = None,
    data_inicio: Optional[date] = None,
    data_fim: Optional[date] = None,
    service: CaixaService = Depends(get_caixa_service),
):
    """
    Lista os caixas da empresa, com filtros por status e período de abertura.
    """
    total, caixas = service.listar(status, data_inicio, data_fim, skip, limit)
    return {"total": total, "caixas": caixas}


@router.get("/{caixa_id}", response_model=CaixaRead)
def buscar_caixa(caixa_id: int, service: CaixaService = Depends(get_caixa_service)):
    """
    Busca um caixa pelo ID.
    """
    return service.buscar_por_id(caixa_id)


@router.get("/{caixa_id}/relatorio")
def relatorio_caixa(caixa_id: int, service: CaixaService = Depends(get_caixa_service)):
    """
    Relatório do caixa: totais, saídas por categoria e entradas por forma de pagamento.
    """
    return service.relatorio(caixa_id)


@router.post("/{caixa_id}/fechar", response_model=CaixaRead)
def fechar_caixa(
    caixa_id: int,
    dados: CaixaFechar,
    service: CaixaService = Depends(get_caixa_service),
    current_user: Usuario = Depends(get_current_active_user),
):
    """
    Fecha o caixa e apura sobra ou falta em relação ao saldo esperado.
    """
    return service.fechar(caixa_id, dados.valor_fechamento, current_user.username, dados.observacoes)


@router.post("/{caixa_id}/movimento", response_model=MovimentoRead, status_code=status.HTTP_201_CREATED)
def registrar_movimento(caixa_id: int, dados: MovimentoCreate, service: CaixaService = Depends(get_caixa_service)):
    """
    Registra uma entrada ou saída avulsa no caixa aberto.
    """
    return service.registrar_movimento(
        caixa_id,
        dados.tipo,
        dados.valor,
        dados.descricao,
        forma_pagamento=dados.forma_pagamento,
        categoria=dados.categoria,
    )


@router.delete("/{caixa_id}/movimento/{movimento_id}", response_model=CaixaRead)
def remover_movimento(
    caixa_id: int,
    movimento_id: int,
    service: CaixaService = Depends(get_caixa_service),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    """
    Remove um movimento do caixa aberto e recalcula os totais.
    """
    return service.remover_movimento(caixa_id, movimento_id)


@router.post("/{caixa_id}/sangria", response_model=MovimentoRead, status_code=status.HTTP_201_CREATED)
def sangria(
    caixa_id: int,
    dados: MovimentoAvulso,
    service: CaixaService = Depends(get_caixa_service),
    current_user: Usuario = Depends(get_current_active_user),
):
    """
    Retira dinheiro do caixa (sangria), limitado ao saldo disponível.
    """
    return service.sangria(caixa_id, dados.valor, dados.descricao, current_user.username)


@router.post("/{caixa_id}/suprimento", response_model=MovimentoRead, status_code=status.HTTP_201_CREATED)
def suprimento(
    caixa_id: int,
    dados: MovimentoAvulso,
    service: CaixaService = Depends(get_caixa_service),
    current_user: Usuario = Depends(get_current_active_user),
):
    """
    Adiciona dinheiro ao caixa (suprimento).
    """
    return service.suprimento(caixa_id, dados.valor, dados.descricao, current_user.username)
