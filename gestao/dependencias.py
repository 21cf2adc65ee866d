# -*- coding: utf-8 -*-
"""
Dependências FastAPI que montam os serviços com a sessão, a empresa do usuário
autenticado e o relógio.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from gestao.auth import get_empresa_id
from gestao.database import get_db
from gestao.jobs.cobranca_recorrente import GeradorCobrancas
from gestao.services.caixa_service import CaixaService
from gestao.services.contas_service import ContaPagarService, ContaReceberService
from gestao.services.matricula_service import MatriculaService
from gestao.utils.relogio import Relogio


def get_relogio() -> Relogio:
    return Relogio()


def _servico(classe):
    def construir(
        db: Session = Depends(get_db),
        empresa_id: int = Depends(get_empresa_id),
        relogio: Relogio = Depends(get_relogio),
    ):
        return classe(db, empresa_id, relogio)
    return construir


get_caixa_service = _servico(CaixaService)
get_conta_receber_service = _servico(ContaReceberService)
get_conta_pagar_service = _servico(ContaPagarService)
get_matricula_service = _servico(MatriculaService)
get_gerador_cobrancas = _servico(GeradorCobrancas)
