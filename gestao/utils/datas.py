# -*- coding: utf-8 -*-
"""
Cálculos de calendário usados na matrícula e na geração de cobranças:
data fim pela periodicidade do plano, próximo vencimento (com ajuste para o
último dia do mês), expiração do plano e competência (MM/YYYY).
"""
import calendar
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from gestao.models.enums import Periodicidade

MESES_POR_PERIODICIDADE = {
    Periodicidade.MENSAL: 1,
    Periodicidade.BIMESTRAL: 2,
    Periodicidade.TRIMESTRAL: 3,
    Periodicidade.QUADRIMESTRAL: 4,
    Periodicidade.SEMESTRAL: 6,
    Periodicidade.ANUAL: 12,
}

DIAS_VENCIMENTO_SEM_DIA_FIXO = 5


def ultimo_dia_do_mes(ano: int, mes: int) -> int:
    return calendar.monthrange(ano, mes)[1]


def ajustar_dia(ano: int, mes: int, dia: int) -> date:
    """Monta a data usando o último dia do mês quando `dia` não existe nele (ex.: 31 em abril -> 30)."""
    return date(ano, mes, min(dia, ultimo_dia_do_mes(ano, mes)))


def _somar_meses(ano, mes, meses):
    d = date(ano, mes, 1) + relativedelta(months=meses)
    return d.year, d.month


def intervalo_meses(plano) -> int:
    """Meses entre duas cobranças. MESES e DIAS cobram mensalmente até expirar."""
    return MESES_POR_PERIODICIDADE.get(plano.periodicidade, 1)


def calcular_data_fim(data_inicio: date, plano) -> date:
    periodicidade = plano.periodicidade

    if periodicidade in MESES_POR_PERIODICIDADE:
        return data_inicio + relativedelta(months=MESES_POR_PERIODICIDADE[periodicidade])
    if periodicidade == Periodicidade.MESES and plano.numero_meses:
        return data_inicio + relativedelta(months=plano.numero_meses)
    if periodicidade == Periodicidade.DIAS and plano.numero_dias:
        return data_inicio + timedelta(days=plano.numero_dias)

    return data_inicio + relativedelta(months=1)


def calcular_proximo_vencimento(dia_vencimento: int, data_referencia: date, plano, data_inicio: date = None) -> date:
    """
    Próximo vencimento a partir da data de referência.

    Usa o dia de vencimento no mês de referência; se essa data já passou, avança um
    mês (um ano para planos anuais). Quando `data_inicio` é informada, planos com
    ciclo de vários meses (bimestral, trimestral, ..., anual) só vencem nos meses
    alinhados ao início da matrícula. O dia é ajustado ao último dia do mês resultante.
    """
    ano, mes = data_referencia.year, data_referencia.month
    intervalo = intervalo_meses(plano)

    if ajustar_dia(ano, mes, dia_vencimento) < data_referencia:
        passo = 12 if plano.periodicidade == Periodicidade.ANUAL and data_inicio is None else 1
        ano, mes = _somar_meses(ano, mes, passo)

    if data_inicio is not None and intervalo > 1:
        while ((ano - data_inicio.year) * 12 + mes - data_inicio.month) % intervalo:
            ano, mes = _somar_meses(ano, mes, 1)

    return ajustar_dia(ano, mes, dia_vencimento)


def primeiro_vencimento(data_inicio: date, dia_vencimento: int = None) -> date:
    """Vencimento da primeira cobrança de uma matrícula."""
    if not dia_vencimento:
        return data_inicio + timedelta(days=DIAS_VENCIMENTO_SEM_DIA_FIXO)

    vencimento = ajustar_dia(data_inicio.year, data_inicio.month, dia_vencimento)
    if vencimento < data_inicio:
        ano, mes = _somar_meses(data_inicio.year, data_inicio.month, 1)
        vencimento = ajustar_dia(ano, mes, dia_vencimento)
    return vencimento


def plano_expirou(plano, data_inicio: date, hoje: date) -> bool:
    # Planos recorrentes sem número de meses/dias não expiram
    if not plano.numero_meses and not plano.numero_dias:
        return False

    expiracao = data_inicio
    if plano.numero_meses:
        expiracao = expiracao + relativedelta(months=plano.numero_meses)
    if plano.numero_dias:
        expiracao = expiracao + timedelta(days=plano.numero_dias)

    return hoje > expiracao


def formatar_competencia(data: date) -> str:
    return f"{data.month:02d}/{data.year}"
