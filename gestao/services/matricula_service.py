# -*- coding: utf-8 -*-
"""
Matrículas: valores (preço do plano menos desconto), vigência pela periodicidade
do plano e primeira conta a receber, criada na mesma transação da matrícula.
"""
import logging

from gestao.exceptions import InvalidStateError, ValidationError
from gestao.models.aluno import Aluno
from gestao.models.desconto import Desconto
from gestao.models.enums import FormaPagamento, SituacaoMatricula, StatusCadastro, StatusConta
from gestao.models.historico_matricula import HistoricoMatricula
from gestao.models.matricula import Matricula
from gestao.models.plano import Plano
from gestao.models.turma import Turma
from gestao.services.base import ServicoEmpresa
from gestao.services.contas_service import ContaReceberService
from gestao.utils import datas
from gestao.utils.valores import ZERO, calcular_valor_desconto, dinheiro, formatar_reais

logger = logging.getLogger(__name__)

CAMPOS_EDITAVEIS = (
    "plano_id", "turma_id", "desconto_id", "data_inicio", "dia_vencimento",
    "forma_pagamento", "parcelamento", "observacoes",
)


def calcular_valores(plano, desconto=None) -> dict:
    """Preço da matrícula congelado a partir do plano e do desconto (se ativo)."""
    valor_matricula = dinheiro(plano.valor)
    valor_desconto = ZERO
    if desconto is not None and desconto.status == StatusCadastro.ATIVO:
        valor_desconto = calcular_valor_desconto(desconto.tipo, desconto.valor, valor_matricula)

    if valor_desconto > valor_matricula:
        raise ValidationError(
            f"Desconto ({formatar_reais(valor_desconto)}) maior que o valor do plano ({formatar_reais(valor_matricula)})"
        )
    return {
        "valor_matricula": valor_matricula,
        "valor_desconto": valor_desconto,
        "valor_final": valor_matricula - valor_desconto,
    }


def calcular_data_fim(data_inicio, plano):
    return datas.calcular_data_fim(data_inicio, plano)


def _validar_dia(dia):
    if dia is not None and not 1 <= int(dia) <= 31:
        raise ValidationError("Dia de vencimento deve estar entre 1 e 31")
    return dia


class MatriculaService(ServicoEmpresa):

    def buscar_por_id(self, matricula_id, bloquear=False) -> Matricula:
        return self._buscar(Matricula, matricula_id, "Matrícula não encontrada", bloquear=bloquear)

    def listar(self, situacao=None, aluno_id=None, skip=0, limit=20):
        query = self._query(Matricula)
        if situacao:
            query = query.filter(Matricula.situacao == situacao)
        if aluno_id:
            query = query.filter(Matricula.aluno_id == aluno_id)

        total = query.count()
        matriculas = query.order_by(Matricula.data_inicio.desc(), Matricula.id.desc()).offset(skip).limit(limit).all()
        return total, matriculas

    # ----- referências -----

    def _plano_ativo(self, plano_id) -> Plano:
        if not plano_id:
            raise ValidationError("Plano é obrigatório")
        plano = self._buscar(Plano, plano_id, "Plano não encontrado")
        if plano.status != StatusCadastro.ATIVO:
            raise ValidationError("Plano inativo não pode ser usado em matrículas")
        return plano

    def _desconto_ativo(self, desconto_id):
        if not desconto_id:
            return None
        desconto = self._buscar(Desconto, desconto_id, "Desconto não encontrado")
        if desconto.status != StatusCadastro.ATIVO:
            raise ValidationError("Desconto inativo não pode ser aplicado")
        return desconto

    def _validar_turma(self, turma_id):
        if turma_id:
            self._buscar(Turma, turma_id, "Turma não encontrada")

    def _registrar_historico(self, matricula, descricao):
        matricula.historico.append(HistoricoMatricula(descricao=descricao, data_alteracao=self.relogio.agora()))

    # ----- criação -----

    def criar(self, aluno_id=None, plano_id=None, data_inicio=None, turma_id=None, desconto_id=None,
              dia_vencimento=None, forma_pagamento=None, parcelamento=1, observacoes=None) -> dict:
        """
        Cria a matrícula e a primeira conta a receber numa única transação.

        Retorna {"matricula": Matricula, "primeira_conta": ContaReceber}.
        """
        if not aluno_id:
            raise ValidationError("Aluno é obrigatório")
        if not data_inicio:
            raise ValidationError("Data de início é obrigatória")
        self._buscar(Aluno, aluno_id, "Aluno não encontrado")
        plano = self._plano_ativo(plano_id)
        self._validar_turma(turma_id)
        desconto = self._desconto_ativo(desconto_id)
        _validar_dia(dia_vencimento)
        if forma_pagamento:
            try:
                forma_pagamento = FormaPagamento(forma_pagamento)
            except ValueError:
                raise ValidationError(f"Forma de pagamento inválida: {forma_pagamento}")

        valores = calcular_valores(plano, desconto)
        data_fim = calcular_data_fim(data_inicio, plano)
        # Dia de vencimento só faz sentido para cobranças recorrentes
        dia = (dia_vencimento or data_inicio.day) if plano.recorrente else None
        vencimento = datas.primeiro_vencimento(data_inicio, dia)

        contas = ContaReceberService(self.db, self.empresa_id, self.relogio)
        with self._transacao():
            matricula = Matricula(
                empresa_id=self.empresa_id,
                codigo=self._proximo_numero("M"),
                aluno_id=aluno_id,
                plano_id=plano.id,
                turma_id=turma_id,
                desconto_id=desconto.id if desconto else None,
                data_inicio=data_inicio,
                data_fim=data_fim,
                dia_vencimento=dia,
                situacao=SituacaoMatricula.ATIVA,
                forma_pagamento=forma_pagamento,
                parcelamento=parcelamento or 1,
                observacoes=observacoes,
                **valores
            )
            self.db.add(matricula)
            self.db.flush()
            self._registrar_historico(matricula, "Matrícula criada")

            primeira_conta = contas._criar(
                aluno_id=aluno_id,
                plano_id=plano.id,
                desconto_id=matricula.desconto_id,
                valor_original=valores["valor_matricula"],
                valor_desconto=valores["valor_desconto"],
                data_vencimento=vencimento,
                matricula_id=matricula.id,
                competencia=datas.formatar_competencia(vencimento),
                descricao=f"Matrícula {matricula.codigo} - {plano.nome}",
                numero_parcela=1,
                total_parcelas=matricula.parcelamento,
                observacoes=f"Primeira cobrança da matrícula {matricula.codigo}",
            )

        self.db.refresh(matricula)
        self.db.refresh(primeira_conta)
        logger.info(
            f"Matrícula {matricula.codigo} criada para o aluno {aluno_id}: "
            f"{formatar_reais(matricula.valor_final)}, primeira conta {primeira_conta.numero} vence {vencimento}"
        )
        return {"matricula": matricula, "primeira_conta": primeira_conta}

    # ----- manutenção -----

    def atualizar(self, matricula_id, dados: dict) -> Matricula:
        dados = {k: v for k, v in dados.items() if k in CAMPOS_EDITAVEIS}

        with self._transacao():
            matricula = self.buscar_por_id(matricula_id, bloquear=True)

            if "turma_id" in dados:
                self._validar_turma(dados["turma_id"])
            if "dia_vencimento" in dados:
                _validar_dia(dados["dia_vencimento"])

            if dados.get("forma_pagamento"):
                try:
                    dados["forma_pagamento"] = FormaPagamento(dados["forma_pagamento"])
                except ValueError:
                    raise ValidationError(f"Forma de pagamento inválida: {dados['forma_pagamento']}")
            if not dados.get("data_inicio"):
                dados.pop("data_inicio", None)

            if dados.get("plano_id"):
                plano = self._plano_ativo(dados["plano_id"])
            else:
                dados.pop("plano_id", None)
                plano = matricula.plano

            if "plano_id" in dados or "desconto_id" in dados:
                desconto_id = dados.get("desconto_id", matricula.desconto_id)
                dados.update(calcular_valores(plano, self._desconto_ativo(desconto_id)))

            if "plano_id" in dados or dados.get("data_inicio"):
                data_inicio = dados.get("data_inicio") or matricula.data_inicio
                dados["data_fim"] = calcular_data_fim(data_inicio, plano)

            if not plano.recorrente:
                dados["dia_vencimento"] = None
            elif not dados.get("dia_vencimento", matricula.dia_vencimento):
                dados["dia_vencimento"] = (dados.get("data_inicio") or matricula.data_inicio).day

            for key, value in dados.items():
                setattr(matricula, key, value)
            self._registrar_historico(matricula, "Matrícula atualizada")
            self.db.flush()

        self.db.refresh(matricula)
        logger.info(f"Matrícula {matricula.codigo} atualizada")
        return matricula

    def inativar(self, matricula_id, motivo) -> Matricula:
        if not motivo or not motivo.strip():
            raise ValidationError("Motivo da inativação é obrigatório")

        with self._transacao():
            matricula = self.buscar_por_id(matricula_id, bloquear=True)
            if matricula.situacao == SituacaoMatricula.INATIVA:
                raise InvalidStateError("Matrícula já está inativa")
            matricula.situacao = SituacaoMatricula.INATIVA
            matricula.motivo_inativacao = motivo.strip()
            self._registrar_historico(matricula, f"Matrícula inativada: {motivo.strip()}")

        self.db.refresh(matricula)
        logger.info(f"Matrícula {matricula.codigo} inativada: {matricula.motivo_inativacao}")
        return matricula

    def reativar(self, matricula_id) -> Matricula:
        with self._transacao():
            matricula = self.buscar_por_id(matricula_id, bloquear=True)
            if matricula.situacao == SituacaoMatricula.ATIVA:
                raise InvalidStateError("Matrícula já está ativa")
            matricula.situacao = SituacaoMatricula.ATIVA
            matricula.motivo_inativacao = None
            self._registrar_historico(matricula, "Matrícula reativada")

        self.db.refresh(matricula)
        logger.info(f"Matrícula {matricula.codigo} reativada")
        return matricula

    def deletar(self, matricula_id):
        """Exclui a matrícula e suas contas em aberto; bloqueado se alguma conta está paga ou teve pagamento."""
        with self._transacao():
            matricula = self.buscar_por_id(matricula_id, bloquear=True)
            contas = list(matricula.contas_receber)
            pagas = [c.numero for c in contas if c.status == StatusConta.PAGO or c.valor_pago > 0]
            if pagas:
                raise InvalidStateError(
                    f"Matrícula possui contas com pagamento registrado ({', '.join(pagas)}) e não pode ser excluída"
                )
            codigo = matricula.codigo
            for conta in contas:
                self.db.delete(conta)
            self.db.flush()
            self.db.expire(matricula, ["contas_receber"])
            self.db.delete(matricula)

        logger.info(f"Matrícula {codigo} excluída com {len(contas)} conta(s) em aberto")
