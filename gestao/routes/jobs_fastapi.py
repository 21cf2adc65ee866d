# -*- coding: utf-8 -*-
"""
Execução manual dos jobs financeiros para a empresa do usuário autenticado.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gestao.auth import get_admin_or_gerente, get_empresa_id
from gestao.database import get_db
from gestao.dependencias import get_gerador_cobrancas, get_relogio
from gestao.jobs.cobranca_recorrente import GeradorCobrancas
from gestao.models.usuario import Usuario
from gestao.services.contas_service import ContaPagarService, ContaReceberService
from gestao.utils.relogio import Relogio

router = APIRouter(tags=["Jobs"])


@router.post("/cobrancas-recorrentes")
def gerar_cobrancas_recorrentes(
    data_referencia: Optional[date] = None,
    gerador: GeradorCobrancas = Depends(get_gerador_cobrancas),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    """
    Gera as cobranças recorrentes do mês para a empresa.
    """
    return gerador.executar(data_referencia)


@router.post("/atualizar-vencidas")
def atualizar_vencidas(
    db: Session = Depends(get_db),
    empresa_id: int = Depends(get_empresa_id),
    relogio: Relogio = Depends(get_relogio),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    """
    Marca como vencidas as contas a receber e a pagar em atraso.
    """
    return {
        "contas_receber": ContaReceberService(db, empresa_id, relogio).atualizar_vencidas(),
        "contas_pagar": ContaPagarService(db, empresa_id, relogio).atualizar_vencidas(),
    }
