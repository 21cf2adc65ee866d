# -*- coding: utf-8 -*-
"""
Contas a receber e a pagar.

As duas variantes têm o mesmo ciclo de vida, implementado em `_ContaService`:

    PENDENTE -> PAGO            (final, por pagamento)
    PENDENTE <-> VENCIDO        (varredura diária; só um pagamento tira do VENCIDO)
    PENDENTE|VENCIDO -> CANCELADO (final, motivo obrigatório)

Todo pagamento gera um movimento no caixa aberto na mesma transação da baixa da
conta: ou os dois são gravados, ou nenhum.
"""
import logging

from dateutil.relativedelta import relativedelta
from sqlalchemy import func

from gestao.exceptions import (
    InvalidStateError, PreconditionError, ValidationError,
)
from gestao.models.aluno import Aluno
from gestao.models.contas import ContaPagar, ContaReceber
from gestao.models.desconto import Desconto
from gestao.models.enums import (
    CategoriaContaPagar, FormaPagamento, StatusCadastro, StatusConta, TipoMovimento,
)
from gestao.models.funcionario import Funcionario
from gestao.models.plano import Plano
from gestao.services.base import ServicoEmpresa
from gestao.services.caixa_service import CaixaService
from gestao.utils.valores import ZERO, calcular_valor_desconto, dinheiro, formatar_reais

logger = logging.getLogger(__name__)


def _valor(valor, campo):
    try:
        return dinheiro(valor)
    except ValueError:
        raise ValidationError(f"{campo} inválido")


def _forma_pagamento(forma):
    if not forma:
        raise ValidationError("Forma de pagamento é obrigatória")
    try:
        return FormaPagamento(forma)
    except ValueError:
        raise ValidationError(f"Forma de pagamento inválida: {forma}")


class _ContaService(ServicoEmpresa):
    """Operações comuns às contas a receber e a pagar."""

    modelo = None
    serie = None
    tipo_movimento = None
    campo_movimento = None
    campos_editaveis = ()

    def buscar_por_id(self, conta_id, bloquear=False):
        return self._buscar(self.modelo, conta_id, "Conta não encontrada", bloquear=bloquear)

    def _validar(self, dados):
        """Validações específicas da variante; recebe os dados já mesclados."""

    def _montar_valores(self, valor_original, valor_desconto):
        valor_original = _valor(valor_original, "Valor original")
        valor_desconto = _valor(valor_desconto, "Valor de desconto")
        if valor_original <= 0:
            raise ValidationError("Valor deve ser maior que zero")
        if valor_desconto < 0:
            raise ValidationError("Valor de desconto não pode ser negativo")
        if valor_desconto > valor_original:
            raise ValidationError(
                f"Desconto ({formatar_reais(valor_desconto)}) maior que o valor original ({formatar_reais(valor_original)})"
            )
        return valor_original, valor_desconto, valor_original - valor_desconto

    def _nova_conta(self, valor_original, valor_desconto=ZERO, data_vencimento=None, **campos):
        if not data_vencimento:
            raise ValidationError("Data de vencimento é obrigatória")
        valor_original, valor_desconto, valor_final = self._montar_valores(valor_original, valor_desconto)

        conta = self.modelo(
            empresa_id=self.empresa_id,
            numero=self._proximo_numero(self.serie),
            valor_original=valor_original,
            valor_desconto=valor_desconto,
            valor_juros=ZERO,
            valor_multa=ZERO,
            valor_final=valor_final,
            valor_pago=ZERO,
            valor_restante=valor_final,
            data_vencimento=data_vencimento,
            status=StatusConta.PENDENTE,
            **campos
        )
        if valor_final == 0:
            # desconto integral: nada a cobrar
            conta.status = StatusConta.PAGO
            conta.data_pagamento = self.relogio.hoje()

        self.db.add(conta)
        self.db.flush()
        return conta

    # ----- pagamento -----

    def registrar_pagamento(self, conta_id, valor_pago, forma_pagamento, data_pagamento=None,
                            valor_juros=0, valor_multa=0):
        forma = _forma_pagamento(forma_pagamento)
        valor_pago = _valor(valor_pago, "Valor pago")
        valor_juros = _valor(valor_juros, "Valor de juros")
        valor_multa = _valor(valor_multa, "Valor de multa")
        if valor_pago <= 0:
            raise ValidationError("Valor pago deve ser maior que zero")
        if valor_juros < 0 or valor_multa < 0:
            raise ValidationError("Juros e multa não podem ser negativos")

        caixa_service = CaixaService(self.db, self.empresa_id, self.relogio)
        if caixa_service.caixa_aberto() is None:
            raise PreconditionError("Nenhum caixa aberto. Abra o caixa antes de registrar pagamentos.")

        with self._transacao():
            caixa = caixa_service.caixa_aberto(bloquear=True)
            if caixa is None:
                raise PreconditionError("Nenhum caixa aberto. Abra o caixa antes de registrar pagamentos.")

            conta = self.buscar_por_id(conta_id, bloquear=True)
            if conta.status == StatusConta.PAGO:
                raise InvalidStateError("Conta já está paga")
            if conta.status == StatusConta.CANCELADO:
                raise InvalidStateError("Conta cancelada não pode receber pagamento")

            novo_final = conta.valor_final + valor_juros + valor_multa
            novo_pago = conta.valor_pago + valor_pago
            if novo_pago > novo_final:
                raise ValidationError(
                    f"Valor pago ({formatar_reais(valor_pago)}) maior que o valor restante "
                    f"({formatar_reais(novo_final - conta.valor_pago)})"
                )

            conta.valor_juros = conta.valor_juros + valor_juros
            conta.valor_multa = conta.valor_multa + valor_multa
            conta.valor_final = novo_final
            conta.valor_pago = novo_pago
            conta.valor_restante = novo_final - novo_pago
            conta.forma_pagamento = forma
            if conta.valor_restante <= 0:
                conta.status = StatusConta.PAGO
                conta.data_pagamento = data_pagamento or self.relogio.hoje()
            self.db.flush()

            caixa_service._lancar_movimento(
                caixa,
                self.tipo_movimento,
                valor_pago,
                f"Pagamento conta {conta.numero}",
                forma_pagamento=forma,
                **{self.campo_movimento: conta.id}
            )

        self.db.refresh(conta)
        logger.info(
            f"Pagamento de {formatar_reais(valor_pago)} na conta {conta.numero} ({forma.value}); "
            f"restante {formatar_reais(conta.valor_restante)}, status {conta.status.value}"
        )
        return conta

    # ----- cancelamento, varredura e edição -----

    def cancelar(self, conta_id, motivo):
        if not motivo or not motivo.strip():
            raise ValidationError("Motivo do cancelamento é obrigatório")

        with self._transacao():
            conta = self.buscar_por_id(conta_id, bloquear=True)
            if conta.status == StatusConta.PAGO:
                raise InvalidStateError("Não é possível cancelar conta já paga")
            if conta.status == StatusConta.CANCELADO:
                raise InvalidStateError("Conta já está cancelada")

            conta.status = StatusConta.CANCELADO
            conta.anotar(f"CANCELADO: {motivo.strip()}")

        self.db.refresh(conta)
        logger.info(f"Conta {conta.numero} cancelada: {motivo.strip()}")
        return conta

    def atualizar_vencidas(self) -> int:
        """Marca como VENCIDO toda conta PENDENTE com vencimento anterior a hoje."""
        hoje = self.relogio.hoje()
        with self._transacao():
            atualizadas = (
                self._query(self.modelo)
                .filter(self.modelo.status == StatusConta.PENDENTE, self.modelo.data_vencimento < hoje)
                .update({self.modelo.status: StatusConta.VENCIDO}, synchronize_session=False)
            )
        logger.info(f"{atualizadas} conta(s) {self.serie} marcadas como vencidas (empresa {self.empresa_id})")
        return atualizadas

    def atualizar(self, conta_id, dados: dict):
        dados = {k: v for k, v in dados.items() if k in self.campos_editaveis}

        with self._transacao():
            conta = self.buscar_por_id(conta_id, bloquear=True)
            if conta.encerrada:
                raise InvalidStateError(f"Não é possível editar conta com status {conta.status.value}")

            mesclados = {campo: getattr(conta, campo) for campo in self.campos_editaveis}
            mesclados.update(dados)
            if not mesclados.get("data_vencimento"):
                raise ValidationError("Data de vencimento é obrigatória")
            self._validar(mesclados)

            if "valor_original" in dados or "valor_desconto" in dados:
                original, desconto, final = self._montar_valores(
                    mesclados["valor_original"], mesclados["valor_desconto"]
                )
                final = final + conta.valor_juros + conta.valor_multa
                restante = final - conta.valor_pago
                if restante < 0:
                    raise ValidationError(
                        f"Novo valor final ({formatar_reais(final)}) menor que o valor já pago ({formatar_reais(conta.valor_pago)})"
                    )
                dados["valor_original"] = original
                dados["valor_desconto"] = desconto
                conta.valor_final = final
                conta.valor_restante = restante
                if restante == 0:
                    conta.status = StatusConta.PAGO
                    conta.data_pagamento = self.relogio.hoje()

            for key, value in dados.items():
                setattr(conta, key, value)
            self.db.flush()

        self.db.refresh(conta)
        logger.info(f"Conta {conta.numero} atualizada: {', '.join(sorted(dados)) or 'sem alterações'}")
        return conta

    # ----- listagem -----

    def _listar(self, query, status=None, data_inicio=None, data_fim=None, skip=0, limit=20):
        if status:
            query = query.filter(self.modelo.status == status)
        if data_inicio:
            query = query.filter(self.modelo.data_vencimento >= data_inicio)
        if data_fim:
            query = query.filter(self.modelo.data_vencimento <= data_fim)

        total = query.count()
        contas = query.order_by(self.modelo.data_vencimento.asc(), self.modelo.id.asc()).offset(skip).limit(limit).all()
        return total, contas


class ContaReceberService(_ContaService):
    modelo = ContaReceber
    serie = "CR"
    tipo_movimento = TipoMovimento.ENTRADA
    campo_movimento = "conta_receber_id"
    campos_editaveis = (
        "aluno_id", "descricao", "categoria", "valor_original", "valor_desconto",
        "data_vencimento", "observacoes",
    )

    def _validar(self, dados):
        if not dados.get("aluno_id"):
            raise ValidationError("Aluno é obrigatório")
        self._buscar(Aluno, dados["aluno_id"], "Aluno não encontrado")

    def _criar(self, aluno_id=None, data_vencimento=None, valor_original=None, valor_desconto=None,
               plano_id=None, desconto_id=None, **campos) -> ContaReceber:
        """Cria a conta sem confirmar a transação (usado também pela matrícula e pelas cobranças)."""
        self._validar({"aluno_id": aluno_id})

        if plano_id:
            plano = self._buscar(Plano, plano_id, "Plano não encontrado")
            if valor_original is None:
                valor_original = plano.valor
        if valor_original is None:
            raise ValidationError("Informe o valor original ou o plano")

        if desconto_id:
            desconto = self._buscar(Desconto, desconto_id, "Desconto não encontrado")
            # valor de desconto informado vem congelado da matrícula
            if valor_desconto is None:
                if desconto.status != StatusCadastro.ATIVO:
                    raise ValidationError("Desconto inativo")
                valor_desconto = calcular_valor_desconto(desconto.tipo, desconto.valor, valor_original)

        return self._nova_conta(
            valor_original,
            valor_desconto or ZERO,
            data_vencimento,
            aluno_id=aluno_id,
            plano_id=plano_id,
            desconto_id=desconto_id,
            **campos
        )

    def criar(self, **dados) -> ContaReceber:
        with self._transacao():
            conta = self._criar(**dados)
        self.db.refresh(conta)
        logger.info(f"Conta a receber {conta.numero} criada: {formatar_reais(conta.valor_final)} vence {conta.data_vencimento}")
        return conta

    def listar(self, status=None, aluno_id=None, matricula_id=None, data_inicio=None, data_fim=None, skip=0, limit=20):
        query = self._query(ContaReceber)
        if aluno_id:
            query = query.filter(ContaReceber.aluno_id == aluno_id)
        if matricula_id:
            query = query.filter(ContaReceber.matricula_id == matricula_id)
        return self._listar(query, status, data_inicio, data_fim, skip, limit)


class ContaPagarService(_ContaService):
    modelo = ContaPagar
    serie = "CP"
    tipo_movimento = TipoMovimento.SAIDA
    campo_movimento = "conta_pagar_id"
    campos_editaveis = (
        "categoria", "descricao", "valor_original", "valor_desconto", "data_vencimento",
        "fornecedor_nome", "fornecedor_doc", "funcionario_id", "documento", "observacoes",
    )

    def _validar(self, dados):
        categoria = dados.get("categoria")
        if not categoria:
            raise ValidationError("Categoria é obrigatória")
        try:
            categoria = CategoriaContaPagar(categoria)
        except ValueError:
            raise ValidationError("Categoria inválida")

        if not dados.get("descricao") or not dados["descricao"].strip():
            raise ValidationError("Descrição é obrigatória")

        if categoria == CategoriaContaPagar.SALARIO:
            if not dados.get("funcionario_id"):
                raise ValidationError("Funcionário é obrigatório para categoria SALARIO")
            self._buscar(Funcionario, dados["funcionario_id"], "Funcionário não encontrado")

        if categoria == CategoriaContaPagar.FORNECEDOR and not (dados.get("fornecedor_nome") or dados.get("fornecedor_doc")):
            raise ValidationError("Fornecedor é obrigatório para categoria FORNECEDOR")

    def _criar(self, categoria=None, descricao=None, valor_original=None, valor_desconto=ZERO,
               data_vencimento=None, **campos) -> ContaPagar:
        self._validar(dict(campos, categoria=categoria, descricao=descricao))
        if valor_original is None:
            raise ValidationError("Valor é obrigatório")
        return self._nova_conta(
            valor_original,
            valor_desconto,
            data_vencimento,
            categoria=CategoriaContaPagar(categoria),
            descricao=descricao.strip(),
            **campos
        )

    def criar(self, **dados) -> ContaPagar:
        with self._transacao():
            conta = self._criar(**dados)
        self.db.refresh(conta)
        logger.info(f"Conta a pagar {conta.numero} ({conta.categoria.value}) criada: {formatar_reais(conta.valor_final)}")
        return conta

    def criar_parcelado(self, total_parcelas, valor_total, data_vencimento_primeira, descricao=None, **dados):
        """Divide `valor_total` em parcelas mensais; a última absorve a diferença de arredondamento."""
        if not total_parcelas or total_parcelas < 2:
            raise ValidationError("Total de parcelas deve ser no mínimo 2")
        valor_total = _valor(valor_total, "Valor total")
        if valor_total <= 0:
            raise ValidationError("Valor total deve ser maior que zero")
        if not data_vencimento_primeira:
            raise ValidationError("Data de vencimento da primeira parcela é obrigatória")
        if not descricao or not descricao.strip():
            raise ValidationError("Descrição é obrigatória")

        valor_parcela = dinheiro(valor_total / total_parcelas)
        if valor_parcela <= 0:
            raise ValidationError("Valor da parcela deve ser maior que zero")

        contas = []
        with self._transacao():
            for i in range(1, total_parcelas + 1):
                valor = valor_parcela if i < total_parcelas else valor_total - valor_parcela * (total_parcelas - 1)
                contas.append(self._criar(
                    descricao=f"{descricao.strip()} - Parcela {i}/{total_parcelas}",
                    valor_original=valor,
                    data_vencimento=data_vencimento_primeira + relativedelta(months=i - 1),
                    numero_parcela=i,
                    total_parcelas=total_parcelas,
                    **dados
                ))

        for conta in contas:
            self.db.refresh(conta)
        logger.info(f"{total_parcelas} parcelas criadas para '{descricao.strip()}' ({formatar_reais(valor_total)})")
        return contas

    def deletar(self, conta_id):
        with self._transacao():
            conta = self.buscar_por_id(conta_id, bloquear=True)
            if conta.status == StatusConta.PAGO:
                raise InvalidStateError("Não é possível deletar conta já paga")
            if conta.valor_pago > 0:
                raise InvalidStateError("Não é possível deletar conta com pagamento parcial")
            numero = conta.numero
            self.db.delete(conta)
        logger.info(f"Conta a pagar {numero} excluída")

    def listar(self, status=None, categoria=None, funcionario_id=None, data_inicio=None, data_fim=None, skip=0, limit=20):
        query = self._query(ContaPagar)
        if categoria:
            query = query.filter(ContaPagar.categoria == categoria)
        if funcionario_id:
            query = query.filter(ContaPagar.funcionario_id == funcionario_id)
        return self._listar(query, status, data_inicio, data_fim, skip, limit)

    def relatorio_totais_por_categoria(self, data_inicio=None, data_fim=None):
        """Totais pagos por categoria, filtrados pela data de pagamento."""
        query = self.db.query(
            ContaPagar.categoria,
            func.sum(ContaPagar.valor_final),
            func.count(ContaPagar.id),
        ).filter(ContaPagar.empresa_id == self.empresa_id, ContaPagar.status == StatusConta.PAGO)
        if data_inicio:
            query = query.filter(ContaPagar.data_pagamento >= data_inicio)
        if data_fim:
            query = query.filter(ContaPagar.data_pagamento <= data_fim)

        categorias = []
        total_geral = ZERO
        for categoria, total, quantidade in query.group_by(ContaPagar.categoria).order_by(ContaPagar.categoria).all():
            total = dinheiro(total)
            total_geral += total
            categorias.append({"categoria": categoria, "total": total, "quantidade": quantidade})

        return {"categorias": categorias, "total_geral": total_geral}
