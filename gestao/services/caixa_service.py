# -*- coding: utf-8 -*-
"""
Livro-caixa: abertura, movimentos (entradas/saídas, sangria, suprimento),
fechamento com apuração de sobra/falta e relatório do período.

Regras mantidas em toda operação confirmada:
- no máximo um caixa ABERTO por empresa;
- movimentos só entram ou saem enquanto o caixa está ABERTO;
- o saldo disponível (abertura + entradas - saídas) nunca fica negativo.
"""
import logging
from collections import OrderedDict
from datetime import datetime, time

from sqlalchemy.exc import IntegrityError

from gestao.exceptions import (
    ConflictError, InvalidStateError, NotFoundError, ValidationError,
)
from gestao.models.caixa import Caixa, MovimentoCaixa
from gestao.models.enums import StatusCaixa, TipoMovimento
from gestao.services.base import ServicoEmpresa
from gestao.utils.valores import ZERO, dinheiro, formatar_reais

logger = logging.getLogger(__name__)

TAG_SANGRIA = "SANGRIA"
TAG_SUPRIMENTO = "SUPRIMENTO"


def _valor_monetario(valor, campo="Valor"):
    if valor is None:
        raise ValidationError(f"{campo} é obrigatório")
    try:
        return dinheiro(valor)
    except ValueError:
        raise ValidationError(f"{campo} inválido")


def _valor_positivo(valor, campo="Valor"):
    valor = _valor_monetario(valor, campo)
    if valor <= 0:
        raise ValidationError(f"{campo} deve ser maior que zero")
    return valor


def _tipo_movimento(tipo):
    try:
        return TipoMovimento(tipo)
    except ValueError:
        raise ValidationError("Tipo de movimento inválido (ENTRADA ou SAIDA)")


def _movimento_dict(movimento):
    return {
        "id": movimento.id,
        "tipo": movimento.tipo,
        "valor": movimento.valor,
        "descricao": movimento.descricao,
        "forma_pagamento": movimento.forma_pagamento,
        "categoria": movimento.categoria,
        "conta_receber_id": movimento.conta_receber_id,
        "conta_pagar_id": movimento.conta_pagar_id,
        "data_hora": movimento.data_hora,
    }


class CaixaService(ServicoEmpresa):

    # ----- consultas -----

    def buscar_por_id(self, caixa_id, bloquear=False) -> Caixa:
        return self._buscar(Caixa, caixa_id, "Caixa não encontrado", bloquear=bloquear)

    def caixa_aberto(self, bloquear=False):
        """Caixa ABERTO da empresa ou None."""
        query = self._query(Caixa).filter(Caixa.status == StatusCaixa.ABERTO)
        if bloquear:
            query = query.with_for_update()
        return query.first()

    def buscar_aberto(self) -> Caixa:
        caixa = self.caixa_aberto()
        if caixa is None:
            raise NotFoundError("Nenhum caixa aberto")
        return caixa

    def listar(self, status=None, data_inicio=None, data_fim=None, skip=0, limit=20):
        query = self._query(Caixa)
        if status:
            query = query.filter(Caixa.status == status)
        if data_inicio:
            query = query.filter(Caixa.data_abertura >= data_inicio)
        if data_fim:
            if not isinstance(data_fim, datetime):
                data_fim = datetime.combine(data_fim, time.max)
            query = query.filter(Caixa.data_abertura <= data_fim)

        total = query.count()
        caixas = query.order_by(Caixa.data_abertura.desc(), Caixa.id.desc()).offset(skip).limit(limit).all()
        return total, caixas

    # ----- abertura e fechamento -----

    def abrir(self, valor_abertura, usuario_abertura, observacoes=None) -> Caixa:
        valor_abertura = _valor_monetario(valor_abertura, "Valor de abertura")
        if valor_abertura < 0:
            raise ValidationError("Valor de abertura inválido")
        if not usuario_abertura or not str(usuario_abertura).strip():
            raise ValidationError("Usuário de abertura é obrigatório")

        aberto = self.caixa_aberto()
        if aberto is not None:
            logger.warning(f"Tentativa de abrir caixa com {aberto.numero} ainda aberto (empresa {self.empresa_id})")
            raise ConflictError(f"Já existe um caixa aberto ({aberto.numero})")

        try:
            with self._transacao():
                caixa = Caixa(
                    empresa_id=self.empresa_id,
                    numero=self._proximo_numero("CX"),
                    data_abertura=self.relogio.agora(),
                    usuario_abertura=usuario_abertura.strip(),
                    valor_abertura=valor_abertura,
                    total_entradas=ZERO,
                    total_saidas=ZERO,
                    status=StatusCaixa.ABERTO,
                    observacoes=observacoes,
                )
                self.db.add(caixa)
                self.db.flush()
        except IntegrityError:
            # outro caixa foi aberto em paralelo (índice uq_caixa_aberto_empresa)
            raise ConflictError("Já existe um caixa aberto")

        self.db.refresh(caixa)
        logger.info(f"Caixa {caixa.numero} aberto por {caixa.usuario_abertura} com {formatar_reais(valor_abertura)}")
        return caixa

    def fechar(self, caixa_id, valor_fechamento, usuario_fechamento, observacoes=None) -> Caixa:
        valor_fechamento = _valor_monetario(valor_fechamento, "Valor de fechamento")
        if valor_fechamento < 0:
            raise ValidationError("Valor de fechamento inválido")
        if not usuario_fechamento or not str(usuario_fechamento).strip():
            raise ValidationError("Usuário de fechamento é obrigatório")

        with self._transacao():
            caixa = self.buscar_por_id(caixa_id, bloquear=True)
            if caixa.status == StatusCaixa.FECHADO:
                raise InvalidStateError("Caixa já está fechado")

            saldo_esperado = caixa.saldo_disponivel
            diferenca = valor_fechamento - saldo_esperado

            notas = observacoes or ""
            if abs(diferenca) > dinheiro("0.01"):
                rotulo = "SOBRA" if diferenca > 0 else "FALTA"
                notas = f"{notas}\n{rotulo}: {formatar_reais(abs(diferenca))}"

            caixa.data_fechamento = self.relogio.agora()
            caixa.usuario_fechamento = usuario_fechamento.strip()
            caixa.valor_fechamento = valor_fechamento
            caixa.saldo_final = valor_fechamento
            caixa.diferenca = diferenca
            caixa.status = StatusCaixa.FECHADO
            caixa.observacoes = f"{caixa.observacoes or ''}\n{notas}".strip() or None

        self.db.refresh(caixa)
        logger.info(
            f"Caixa {caixa.numero} fechado por {caixa.usuario_fechamento}: "
            f"esperado {formatar_reais(saldo_esperado)}, contado {formatar_reais(valor_fechamento)}"
        )
        return caixa

    # ----- movimentos -----

    def _lancar_movimento(self, caixa, tipo, valor, descricao, forma_pagamento=None,
                          categoria=None, conta_receber_id=None, conta_pagar_id=None) -> MovimentoCaixa:
        """
        Acrescenta o movimento ao caixa e atualiza os totais a partir dos totais atuais.

        Não confirma a transação: quem chama decide o commit, o que permite lançar o
        movimento junto com a baixa de uma conta numa única transação.
        """
        if caixa.status != StatusCaixa.ABERTO:
            raise InvalidStateError("Caixa não está aberto")
        tipo = _tipo_movimento(tipo)
        valor = _valor_positivo(valor)
        if not descricao or not descricao.strip():
            raise ValidationError("Descrição é obrigatória")

        if tipo == TipoMovimento.SAIDA:
            disponivel = caixa.saldo_disponivel
            if valor > disponivel or disponivel - valor < 0:
                raise ValidationError(
                    f"Valor de saída ({formatar_reais(valor)}) maior que saldo disponível ({formatar_reais(disponivel)})"
                )
            caixa.total_saidas = dinheiro(caixa.total_saidas + valor)
        else:
            caixa.total_entradas = dinheiro(caixa.total_entradas + valor)

        movimento = MovimentoCaixa(
            caixa_id=caixa.id,
            tipo=tipo,
            valor=valor,
            descricao=descricao.strip(),
            forma_pagamento=forma_pagamento.value if hasattr(forma_pagamento, "value") else forma_pagamento,
            categoria=categoria,
            conta_receber_id=conta_receber_id,
            conta_pagar_id=conta_pagar_id,
            data_hora=self.relogio.agora(),
        )
        caixa.movimentos.append(movimento)
        self.db.flush()
        return movimento

    def registrar_movimento(self, caixa_id, tipo, valor, descricao, **meta) -> MovimentoCaixa:
        with self._transacao():
            caixa = self.buscar_por_id(caixa_id, bloquear=True)
            movimento = self._lancar_movimento(caixa, tipo, valor, descricao, **meta)

        logger.info(f"Movimento {movimento.tipo.value} de {formatar_reais(movimento.valor)} no caixa {caixa.numero}")
        return movimento

    def remover_movimento(self, caixa_id, movimento_id) -> Caixa:
        with self._transacao():
            caixa = self.buscar_por_id(caixa_id, bloquear=True)
            if caixa.status == StatusCaixa.FECHADO:
                raise InvalidStateError("Não é possível remover movimento de caixa fechado")

            movimento = next((m for m in caixa.movimentos if m.id == movimento_id), None)
            if movimento is None:
                raise NotFoundError("Movimento não encontrado")

            if movimento.tipo == TipoMovimento.ENTRADA:
                if caixa.saldo_disponivel - movimento.valor < 0:
                    raise ValidationError("Remover esta entrada deixaria o saldo do caixa negativo")
                caixa.total_entradas = dinheiro(caixa.total_entradas - movimento.valor)
            else:
                caixa.total_saidas = dinheiro(caixa.total_saidas - movimento.valor)

            caixa.movimentos.remove(movimento)
            self.db.flush()

        self.db.refresh(caixa)
        logger.info(f"Movimento {movimento_id} removido do caixa {caixa.numero}")
        return caixa

    def sangria(self, caixa_id, valor, descricao, usuario_responsavel) -> MovimentoCaixa:
        valor = _valor_positivo(valor, "Valor de sangria")
        if not usuario_responsavel:
            raise ValidationError("Usuário responsável é obrigatório")
        if not descricao or not descricao.strip():
            raise ValidationError("Descrição é obrigatória")

        with self._transacao():
            caixa = self.buscar_por_id(caixa_id, bloquear=True)
            if caixa.status != StatusCaixa.ABERTO:
                raise InvalidStateError("Caixa não está aberto")
            disponivel = caixa.saldo_disponivel
            if valor > disponivel or disponivel - valor < 0:
                logger.warning(
                    f"Sangria de {formatar_reais(valor)} recusada no caixa {caixa.numero}: "
                    f"saldo {formatar_reais(disponivel)}"
                )
                raise ValidationError(
                    f"Valor de sangria ({formatar_reais(valor)}) maior que saldo disponível ({formatar_reais(disponivel)})"
                )
            movimento = self._lancar_movimento(
                caixa,
                TipoMovimento.SAIDA,
                valor,
                f"SANGRIA: {descricao.strip()} - Responsável: {usuario_responsavel}",
                forma_pagamento=TAG_SANGRIA,
                categoria=TAG_SANGRIA,
            )

        logger.info(f"Sangria de {formatar_reais(valor)} no caixa {caixa.numero} por {usuario_responsavel}")
        return movimento

    def suprimento(self, caixa_id, valor, descricao, usuario_responsavel) -> MovimentoCaixa:
        valor = _valor_positivo(valor, "Valor de suprimento")
        if not usuario_responsavel:
            raise ValidationError("Usuário responsável é obrigatório")
        if not descricao or not descricao.strip():
            raise ValidationError("Descrição é obrigatória")

        with self._transacao():
            caixa = self.buscar_por_id(caixa_id, bloquear=True)
            movimento = self._lancar_movimento(
                caixa,
                TipoMovimento.ENTRADA,
                valor,
                f"SUPRIMENTO: {descricao.strip()} - Responsável: {usuario_responsavel}",
                forma_pagamento=TAG_SUPRIMENTO,
                categoria=TAG_SUPRIMENTO,
            )

        logger.info(f"Suprimento de {formatar_reais(valor)} no caixa {caixa.numero} por {usuario_responsavel}")
        return movimento

    # ----- relatório -----

    def relatorio(self, caixa_id) -> dict:
        caixa = self.buscar_por_id(caixa_id)
        movimentos = sorted(caixa.movimentos, key=lambda m: (m.data_hora, m.id))
        entradas = [m for m in movimentos if m.tipo == TipoMovimento.ENTRADA]
        saidas = [m for m in movimentos if m.tipo == TipoMovimento.SAIDA]

        saidas_por_categoria = OrderedDict()
        for mov in saidas:
            grupo = saidas_por_categoria.setdefault(
                mov.categoria or "OUTROS", {"total": ZERO, "quantidade": 0, "movimentos": []}
            )
            grupo["total"] += mov.valor
            grupo["quantidade"] += 1
            grupo["movimentos"].append(_movimento_dict(mov))

        entradas_por_forma = OrderedDict()
        for mov in entradas:
            grupo = entradas_por_forma.setdefault(
                mov.forma_pagamento or "NÃO INFORMADO", {"total": ZERO, "quantidade": 0}
            )
            grupo["total"] += mov.valor
            grupo["quantidade"] += 1

        saldo_esperado = caixa.saldo_disponivel
        diferenca = (
            caixa.valor_fechamento - saldo_esperado
            if caixa.status == StatusCaixa.FECHADO and caixa.valor_fechamento is not None
            else ZERO
        )

        return {
            "caixa": {
                "id": caixa.id,
                "numero": caixa.numero,
                "status": caixa.status,
                "data_abertura": caixa.data_abertura,
                "data_fechamento": caixa.data_fechamento,
                "usuario_abertura": caixa.usuario_abertura,
                "usuario_fechamento": caixa.usuario_fechamento,
            },
            "valores": {
                "valor_abertura": caixa.valor_abertura,
                "total_entradas": caixa.total_entradas,
                "total_saidas": caixa.total_saidas,
                "saldo_esperado": saldo_esperado,
                "valor_fechamento": caixa.valor_fechamento,
                "diferenca": diferenca,
                "saldo_final": caixa.saldo_final,
            },
            "resumo": {
                "total_movimentos": len(movimentos),
                "quantidade_entradas": len(entradas),
                "quantidade_saidas": len(saidas),
            },
            "detalhes": {
                "saidas_por_categoria": saidas_por_categoria,
                "entradas_por_forma_pagamento": entradas_por_forma,
            },
            "movimentos": [_movimento_dict(m) for m in movimentos],
        }
