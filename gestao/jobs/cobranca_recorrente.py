# -*- coding: utf-8 -*-
"""
Geração das cobranças recorrentes.

Para cada matrícula ATIVA de plano RECORRENTE com dia de vencimento, calcula o
próximo vencimento a partir da data de referência e cria a conta a receber da
competência (MM/YYYY), no máximo uma vez por matrícula e competência.

Um erro numa matrícula é registrado no resultado e não interrompe as demais.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from gestao.models.contas import ContaReceber
from gestao.models.enums import SituacaoMatricula, StatusConta, TipoCobranca
from gestao.models.matricula import Matricula
from gestao.models.plano import Plano
from gestao.services.base import ServicoEmpresa
from gestao.services.contas_service import ContaReceberService
from gestao.utils import datas

logger = logging.getLogger(__name__)

GERADA = "gerada"
EXISTENTE = "existente"
IGNORADA = "ignorada"
ERRO = "erro"


class GeradorCobrancas(ServicoEmpresa):

    def buscar_matriculas(self):
        return (
            self._query(Matricula)
            .join(Plano, Matricula.plano_id == Plano.id)
            .options(joinedload(Matricula.plano))
            .filter(
                Matricula.situacao == SituacaoMatricula.ATIVA,
                Matricula.dia_vencimento.isnot(None),
                Plano.tipo_cobranca == TipoCobranca.RECORRENTE,
            )
            .order_by(Matricula.id)
            .all()
        )

    def _cobranca_existente(self, matricula_id, competencia):
        return (
            self._query(ContaReceber)
            .filter(
                ContaReceber.matricula_id == matricula_id,
                ContaReceber.competencia == competencia,
                ContaReceber.status != StatusConta.CANCELADO,
            )
            .first()
        )

    def processar_matricula(self, matricula, data_referencia) -> dict:
        plano = matricula.plano
        detalhe = {"matricula_id": matricula.id, "codigo": matricula.codigo}

        if plano.tipo_cobranca == TipoCobranca.UNICA:
            return dict(detalhe, status=IGNORADA, motivo="Plano com cobrança única - não gera recorrência")

        inicio = matricula.data_inicio
        if (data_referencia.year, data_referencia.month) < (inicio.year, inicio.month):
            return dict(detalhe, status=IGNORADA, motivo="Matrícula ainda não iniciada")

        if datas.plano_expirou(plano, inicio, data_referencia):
            return dict(detalhe, status=IGNORADA, motivo="Plano expirado - período de vigência encerrado")

        vencimento = datas.calcular_proximo_vencimento(matricula.dia_vencimento, data_referencia, plano, inicio)
        competencia = datas.formatar_competencia(vencimento)

        existente = self._cobranca_existente(matricula.id, competencia)
        if existente is not None:
            return dict(
                detalhe, status=EXISTENTE, motivo="Cobrança já existe para este período",
                numero=existente.numero, competencia=competencia,
            )

        contas = ContaReceberService(self.db, self.empresa_id, self.relogio)
        try:
            with self._transacao():
                conta = contas._criar(
                    aluno_id=matricula.aluno_id,
                    plano_id=matricula.plano_id,
                    desconto_id=matricula.desconto_id,
                    valor_original=matricula.valor_matricula,
                    valor_desconto=matricula.valor_desconto,
                    data_vencimento=vencimento,
                    matricula_id=matricula.id,
                    competencia=competencia,
                    descricao=f"Mensalidade {competencia} - {plano.nome}",
                    observacoes=f"Cobrança automática - Matrícula: {matricula.codigo} - Ref: {competencia}",
                )
                numero = conta.numero
        except IntegrityError:
            # outra execução gerou a mesma competência (uq_conta_receber_matricula_competencia)
            existente = self._cobranca_existente(matricula.id, competencia)
            return dict(
                detalhe, status=EXISTENTE, motivo="Cobrança já existe para este período",
                numero=existente.numero if existente else None, competencia=competencia,
            )

        return dict(
            detalhe, status=GERADA, numero=numero, competencia=competencia, vencimento=vencimento,
        )

    def executar(self, data_referencia=None) -> dict:
        data_referencia = data_referencia or self.relogio.hoje()
        logger.info(f"Gerando cobranças recorrentes da empresa {self.empresa_id} para {data_referencia}")

        matriculas = [(m.id, m.codigo) for m in self.buscar_matriculas()]
        resultado = {
            "data_referencia": data_referencia,
            "total": len(matriculas),
            "geradas": 0,
            "existentes": 0,
            "ignoradas": 0,
            "erros": 0,
            "detalhes": [],
        }

        for matricula_id, codigo in matriculas:
            try:
                matricula = self._buscar(Matricula, matricula_id, "Matrícula não encontrada")
                detalhe = self.processar_matricula(matricula, data_referencia)
            except Exception as e:
                self.db.rollback()
                logger.exception(f"Erro ao gerar cobrança da matrícula {codigo}")
                detalhe = {"matricula_id": matricula_id, "codigo": codigo, "status": ERRO, "erro": str(e)}

            chave = {GERADA: "geradas", EXISTENTE: "existentes", IGNORADA: "ignoradas", ERRO: "erros"}[detalhe["status"]]
            resultado[chave] += 1
            resultado["detalhes"].append(detalhe)
            if detalhe["status"] == GERADA:
                logger.info(f"-> GERADA: matrícula {codigo} | conta {detalhe['numero']} | venc {detalhe['vencimento']}")

        logger.info(
            f"Cobranças da empresa {self.empresa_id}: {resultado['geradas']} geradas, "
            f"{resultado['existentes']} existentes, {resultado['ignoradas']} ignoradas, {resultado['erros']} erros"
        )
        return resultado
