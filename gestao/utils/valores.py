# -*- coding: utf-8 -*-
"""
Aritmética monetária com Decimal (duas casas, arredondamento comercial).
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from gestao.models.enums import TipoDesconto

CENTAVO = Decimal("0.01")
ZERO = Decimal("0.00")


def dinheiro(valor) -> Decimal:
    """Converte int/float/str/Decimal em Decimal com duas casas. `None` vira zero."""
    if valor is None:
        return ZERO
    if isinstance(valor, float):
        # str() evita carregar o erro binário do float para o Decimal
        valor = str(valor)
    try:
        return Decimal(valor).quantize(CENTAVO, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Valor monetário inválido: {valor!r}")


def calcular_valor_desconto(tipo, valor, base) -> Decimal:
    """Percentual aplica `base * valor / 100`; monetário usa o próprio valor."""
    if tipo == TipoDesconto.PERCENTUAL:
        return dinheiro(dinheiro(base) * Decimal(str(valor)) / 100)
    return dinheiro(valor)


def formatar_reais(valor) -> str:
    return f"R$ {dinheiro(valor):.2f}"
