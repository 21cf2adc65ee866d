# -*- coding: utf-8 -*-
"""
Enumerações compartilhadas pelos modelos, schemas e serviços.
"""
import enum

from sqlalchemy import Enum


class StatusCadastro(str, enum.Enum):
    ATIVO = "ATIVO"
    INATIVO = "INATIVO"


class StatusCaixa(str, enum.Enum):
    ABERTO = "ABERTO"
    FECHADO = "FECHADO"


class TipoMovimento(str, enum.Enum):
    ENTRADA = "ENTRADA"
    SAIDA = "SAIDA"


class StatusConta(str, enum.Enum):
    PENDENTE = "PENDENTE"
    PAGO = "PAGO"
    VENCIDO = "VENCIDO"
    CANCELADO = "CANCELADO"


class FormaPagamento(str, enum.Enum):
    DINHEIRO = "DINHEIRO"
    PIX = "PIX"
    CARTAO_CREDITO = "CARTAO_CREDITO"
    CARTAO_DEBITO = "CARTAO_DEBITO"
    TRANSFERENCIA = "TRANSFERENCIA"
    BOLETO = "BOLETO"
    CHEQUE = "CHEQUE"


class CategoriaContaPagar(str, enum.Enum):
    FORNECEDOR = "FORNECEDOR"
    SALARIO = "SALARIO"
    ALUGUEL = "ALUGUEL"
    ENERGIA = "ENERGIA"
    AGUA = "AGUA"
    TELEFONE = "TELEFONE"
    INTERNET = "INTERNET"
    EQUIPAMENTO = "EQUIPAMENTO"
    MANUTENCAO = "MANUTENCAO"
    OUTROS = "OUTROS"


class Periodicidade(str, enum.Enum):
    MENSAL = "MENSAL"
    BIMESTRAL = "BIMESTRAL"
    TRIMESTRAL = "TRIMESTRAL"
    QUADRIMESTRAL = "QUADRIMESTRAL"
    SEMESTRAL = "SEMESTRAL"
    ANUAL = "ANUAL"
    MESES = "MESES"
    DIAS = "DIAS"


class TipoCobranca(str, enum.Enum):
    RECORRENTE = "RECORRENTE"
    UNICA = "UNICA"


class TipoDesconto(str, enum.Enum):
    PERCENTUAL = "PERCENTUAL"
    MONETARIO = "MONETARIO"


class SituacaoMatricula(str, enum.Enum):
    ATIVA = "ATIVA"
    INATIVA = "INATIVA"


def enum_coluna(enum_cls):
    """Tipo de coluna que grava o valor do enum como VARCHAR (portável entre SQLite e PostgreSQL)."""
    return Enum(enum_cls, native_enum=False, length=20, validate_strings=True)
