# -*- coding: utf-8 -*-
"""
Agendamento diário dos jobs financeiros (APScheduler).

- 00:00 geração das cobranças recorrentes
- 01:00 atualização das contas vencidas (a receber e a pagar)

Cada empresa ativa é processada com a sua própria sessão; a falha de uma empresa
é registrada no log e não impede as demais nem derruba o agendador.
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from gestao.config import settings
from gestao.database import SessionLocal
from gestao.jobs.cobranca_recorrente import GeradorCobrancas
from gestao.models.empresa import Empresa
from gestao.services.contas_service import ContaPagarService, ContaReceberService

logger = logging.getLogger(__name__)


def _empresas_ativas(session_factory):
    db = session_factory()
    try:
        return [e.id for e in db.query(Empresa).filter(Empresa.ativa == True).order_by(Empresa.id).all()]
    finally:
        db.close()


def _por_empresa(nome, tarefa, empresa_id=None, session_factory=SessionLocal):
    """Executa `tarefa(db, empresa_id)` para uma empresa ou para todas as ativas."""
    empresas = [empresa_id] if empresa_id else _empresas_ativas(session_factory)
    resultados = {}
    for eid in empresas:
        db = session_factory()
        try:
            resultados[eid] = tarefa(db, eid)
        except Exception:
            logger.exception(f"Falha no job '{nome}' para a empresa {eid}")
            resultados[eid] = {"erro": f"Falha no job '{nome}'"}
        finally:
            db.close()
    return resultados


def executar_cobrancas(data_referencia=None, empresa_id=None, session_factory=SessionLocal):
    return _por_empresa(
        "cobrancas_recorrentes",
        lambda db, eid: GeradorCobrancas(db, eid).executar(data_referencia),
        empresa_id,
        session_factory,
    )


def executar_atualizacao_vencidas(empresa_id=None, session_factory=SessionLocal):
    def tarefa(db, eid):
        return {
            "contas_receber": ContaReceberService(db, eid).atualizar_vencidas(),
            "contas_pagar": ContaPagarService(db, eid).atualizar_vencidas(),
        }
    return _por_empresa("atualizar_vencidas", tarefa, empresa_id, session_factory)


class AgendadorFinanceiro:
    """Agenda os jobs diários num BackgroundScheduler."""

    def __init__(self, session_factory=SessionLocal, timezone=None):
        self.session_factory = session_factory
        self.scheduler = BackgroundScheduler(timezone=timezone or settings.SCHEDULER_TIMEZONE)

    def start(self):
        logger.info("Iniciando agendamento dos jobs financeiros...")

        self.scheduler.add_job(
            self._gerar_cobrancas,
            CronTrigger(hour=0, minute=0),
            id="cobrancas_recorrentes",
            name="Gerar cobranças recorrentes",
            replace_existing=True,
        )
        self.scheduler.add_job(
            self._atualizar_vencidas,
            CronTrigger(hour=1, minute=0),
            id="atualizar_vencidas",
            name="Atualizar contas vencidas",
            replace_existing=True,
        )

        self.scheduler.start()
        logger.info("Jobs financeiros agendados (00:00 cobranças, 01:00 vencidas)")

    def _gerar_cobrancas(self):
        try:
            resultados = executar_cobrancas(session_factory=self.session_factory)
            logger.info(f"Job de cobranças concluído para {len(resultados)} empresa(s)")
        except Exception as e:
            logger.error(f"Erro ao executar job de cobranças: {e}")

    def _atualizar_vencidas(self):
        try:
            resultados = executar_atualizacao_vencidas(session_factory=self.session_factory)
            logger.info(f"Job de contas vencidas concluído para {len(resultados)} empresa(s)")
        except Exception as e:
            logger.error(f"Erro ao atualizar contas vencidas: {e}")

    def stop(self):
        if self.scheduler.running:
            logger.info("Parando agendador dos jobs financeiros...")
            self.scheduler.shutdown(wait=False)
