from datetime import date
from decimal import Decimal

import pytest

from gestao.exceptions import InvalidStateError, NotFoundError, ValidationError
from gestao.models.caixa import MovimentoCaixa
from gestao.models.contas import ContaPagar
from gestao.models.enums import CategoriaContaPagar, StatusConta, TipoMovimento


def _conta(service, valor="300.00", categoria="ALUGUEL", **campos):
    campos.setdefault("descricao", "Aluguel março")
    campos.setdefault("data_vencimento", date(2024, 3, 20))
    return service.criar(categoria=categoria, valor_original=Decimal(valor), **campos)


def test_criar_conta(pagar_service):
    conta = _conta(pagar_service)

    assert conta.numero == "CP00001"
    assert conta.categoria == CategoriaContaPagar.ALUGUEL
    assert conta.status == StatusConta.PENDENTE
    assert conta.valor_restante == Decimal("300.00")


def test_salario_exige_funcionario(pagar_service):
    with pytest.raises(ValidationError):
        _conta(pagar_service, categoria="SALARIO", descricao="Salário março")
    with pytest.raises(NotFoundError):
        _conta(pagar_service, categoria="SALARIO", descricao="Salário março", funcionario_id=999)


def test_salario_com_funcionario(pagar_service, fabrica):
    professor = fabrica.funcionario()
    conta = _conta(pagar_service, categoria="SALARIO", descricao="Salário março", funcionario_id=professor.id)
    assert conta.funcionario_id == professor.id


def test_fornecedor_exige_identificacao(pagar_service):
    with pytest.raises(ValidationError):
        _conta(pagar_service, categoria="FORNECEDOR", descricao="Kimonos")
    conta = _conta(pagar_service, categoria="FORNECEDOR", descricao="Kimonos", fornecedor_nome="Kimonos Ltda")
    assert conta.fornecedor_nome == "Kimonos Ltda"


def test_categoria_e_descricao_validas(pagar_service):
    with pytest.raises(ValidationError):
        _conta(pagar_service, categoria="VIAGEM")
    with pytest.raises(ValidationError):
        _conta(pagar_service, descricao="   ")


def test_pagamento_gera_saida_no_caixa(db, pagar_service, caixa_service, caixa_aberto):
    conta = _conta(pagar_service, valor="60.00", categoria="ENERGIA", descricao="Conta de luz")

    paga = pagar_service.registrar_pagamento(conta.id, Decimal("60"), "PIX")

    assert paga.status == StatusConta.PAGO
    caixa = caixa_service.buscar_por_id(caixa_aberto.id)
    assert caixa.total_saidas == Decimal("60.00")
    assert caixa.saldo_disponivel == Decimal("40.00")
    movimento = db.query(MovimentoCaixa).one()
    assert movimento.tipo == TipoMovimento.SAIDA
    assert movimento.conta_pagar_id == conta.id


def test_pagamento_sem_saldo_no_caixa(db, pagar_service, caixa_service, caixa_aberto):
    conta = _conta(pagar_service, valor="300.00")

    with pytest.raises(ValidationError):
        pagar_service.registrar_pagamento(conta.id, Decimal("300"), "DINHEIRO")

    atual = pagar_service.buscar_por_id(conta.id)
    assert atual.status == StatusConta.PENDENTE
    assert atual.valor_pago == Decimal("0")
    assert caixa_service.buscar_por_id(caixa_aberto.id).total_saidas == Decimal("0")
    assert db.query(MovimentoCaixa).count() == 0


def test_parcelamento(pagar_service):
    parcelas = pagar_service.criar_parcelado(
        total_parcelas=3,
        valor_total=Decimal("100.00"),
        data_vencimento_primeira=date(2024, 1, 31),
        descricao="Tatame novo",
        categoria="EQUIPAMENTO",
    )

    assert [p.valor_original for p in parcelas] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
    assert sum(p.valor_final for p in parcelas) == Decimal("100.00")
    assert [p.data_vencimento for p in parcelas] == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]
    assert [p.descricao for p in parcelas] == [
        "Tatame novo - Parcela 1/3", "Tatame novo - Parcela 2/3", "Tatame novo - Parcela 3/3",
    ]
    assert [p.numero for p in parcelas] == ["CP00001", "CP00002", "CP00003"]
    assert all(p.total_parcelas == 3 for p in parcelas)


def test_parcelamento_minimo_duas_parcelas(db, pagar_service):
    with pytest.raises(ValidationError):
        pagar_service.criar_parcelado(
            total_parcelas=1, valor_total=Decimal("100"), data_vencimento_primeira=date(2024, 1, 31),
            descricao="Tatame", categoria="EQUIPAMENTO",
        )
    assert db.query(ContaPagar).count() == 0


def test_parcelamento_invalido_nao_grava_nenhuma_parcela(db, pagar_service):
    with pytest.raises(ValidationError):
        pagar_service.criar_parcelado(
            total_parcelas=3, valor_total=Decimal("100"), data_vencimento_primeira=date(2024, 1, 31),
            descricao="Kimonos", categoria="FORNECEDOR",
        )
    assert db.query(ContaPagar).count() == 0


def test_deletar_conta_pendente(pagar_service):
    conta = _conta(pagar_service)
    pagar_service.deletar(conta.id)
    with pytest.raises(NotFoundError):
        pagar_service.buscar_por_id(conta.id)


def test_deletar_conta_com_pagamento(pagar_service, caixa_aberto):
    conta = _conta(pagar_service, valor="80.00")
    pagar_service.registrar_pagamento(conta.id, Decimal("30"), "DINHEIRO")
    with pytest.raises(InvalidStateError):
        pagar_service.deletar(conta.id)

    pagar_service.registrar_pagamento(conta.id, Decimal("50"), "DINHEIRO")
    with pytest.raises(InvalidStateError):
        pagar_service.deletar(conta.id)


def test_atualizar_vencidas(db, pagar_service):
    vencida = _conta(pagar_service, data_vencimento=date(2024, 3, 1))
    _conta(pagar_service, data_vencimento=date(2024, 4, 1))

    assert pagar_service.atualizar_vencidas() == 1
    assert pagar_service.atualizar_vencidas() == 0
    db.expire_all()
    assert pagar_service.buscar_por_id(vencida.id).status == StatusConta.VENCIDO


def test_atualizar_revalida_categoria(pagar_service):
    conta = _conta(pagar_service)
    with pytest.raises(ValidationError):
        pagar_service.atualizar(conta.id, {"categoria": "SALARIO"})

    atualizada = pagar_service.atualizar(conta.id, {"valor_original": Decimal("350"), "documento": "Boleto 123"})
    assert atualizada.valor_final == Decimal("350.00")
    assert atualizada.documento == "Boleto 123"


def test_relatorio_totais_por_categoria(pagar_service, caixa_service, caixa_aberto):
    caixa_service.suprimento(caixa_aberto.id, Decimal("500"), "Reforço", "gerente")
    luz = _conta(pagar_service, valor="60", categoria="ENERGIA", descricao="Luz")
    agua = _conta(pagar_service, valor="40", categoria="AGUA", descricao="Água")
    luz2 = _conta(pagar_service, valor="70", categoria="ENERGIA", descricao="Luz 2")
    _conta(pagar_service, valor="999", categoria="ENERGIA", descricao="Não paga")
    for conta in (luz, agua, luz2):
        pagar_service.registrar_pagamento(conta.id, conta.valor_final, "PIX")

    relatorio = pagar_service.relatorio_totais_por_categoria(date(2024, 3, 1), date(2024, 3, 31))

    totais = {c["categoria"]: (c["total"], c["quantidade"]) for c in relatorio["categorias"]}
    assert totais == {
        CategoriaContaPagar.AGUA: (Decimal("40.00"), 1),
        CategoriaContaPagar.ENERGIA: (Decimal("130.00"), 2),
    }
    assert relatorio["total_geral"] == Decimal("170.00")

    vazio = pagar_service.relatorio_totais_por_categoria(date(2024, 4, 1), date(2024, 4, 30))
    assert vazio == {"categorias": [], "total_geral": Decimal("0")}


def test_listar_por_categoria(pagar_service):
    _conta(pagar_service, categoria="ENERGIA", descricao="Luz")
    _conta(pagar_service, categoria="AGUA", descricao="Água")

    total, contas = pagar_service.listar(categoria=CategoriaContaPagar.AGUA)
    assert total == 1
    assert contas[0].descricao == "Água"
