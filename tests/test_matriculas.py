from datetime import date
from decimal import Decimal

import pytest

from gestao.exceptions import InvalidStateError, NotFoundError, ValidationError
from gestao.models.contas import ContaReceber
from gestao.models.enums import (
    Periodicidade, SituacaoMatricula, StatusCadastro, StatusConta, TipoCobranca, TipoDesconto,
)
from gestao.models.matricula import Matricula
from gestao.services.contas_service import ContaReceberService
from gestao.services.matricula_service import calcular_valores


@pytest.fixture
def aluno(fabrica):
    return fabrica.aluno()


@pytest.fixture
def plano(fabrica):
    return fabrica.plano(valor="150.00", nome="Jiu-Jitsu Mensal")


def test_criar_matricula_com_primeira_conta(matricula_service, aluno, plano, fabrica):
    desconto = fabrica.desconto(valor="30", tipo=TipoDesconto.MONETARIO)

    resultado = matricula_service.criar(
        aluno_id=aluno.id, plano_id=plano.id, desconto_id=desconto.id, data_inicio=date(2024, 3, 15),
    )
    matricula = resultado["matricula"]
    conta = resultado["primeira_conta"]

    assert matricula.codigo == "M00001"
    assert matricula.situacao == SituacaoMatricula.ATIVA
    assert matricula.valor_matricula == Decimal("150.00")
    assert matricula.valor_desconto == Decimal("30.00")
    assert matricula.valor_final == Decimal("120.00")
    assert matricula.data_fim == date(2024, 4, 15)
    assert matricula.dia_vencimento == 15
    assert [h.descricao for h in matricula.historico] == ["Matrícula criada"]

    assert conta.numero == "CR00001"
    assert conta.matricula_id == matricula.id
    assert conta.valor_final == Decimal("120.00")
    assert conta.data_vencimento == date(2024, 3, 15)
    assert conta.competencia == "03/2024"
    assert conta.descricao == "Matrícula M00001 - Jiu-Jitsu Mensal"
    assert conta.status == StatusConta.PENDENTE


def test_dia_vencimento_informado(matricula_service, aluno, plano):
    resultado = matricula_service.criar(
        aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15), dia_vencimento=10,
    )
    assert resultado["matricula"].dia_vencimento == 10
    assert resultado["primeira_conta"].data_vencimento == date(2024, 4, 10)


def test_plano_de_cobranca_unica_nao_tem_dia_de_vencimento(matricula_service, aluno, fabrica):
    plano = fabrica.plano(periodicidade=Periodicidade.SEMESTRAL, tipo_cobranca=TipoCobranca.UNICA)

    resultado = matricula_service.criar(
        aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15), dia_vencimento=10,
    )

    assert resultado["matricula"].dia_vencimento is None
    assert resultado["matricula"].data_fim == date(2024, 9, 15)
    assert resultado["primeira_conta"].data_vencimento == date(2024, 3, 20)


def test_plano_inativo(matricula_service, aluno, fabrica):
    plano = fabrica.plano(status=StatusCadastro.INATIVO)
    with pytest.raises(ValidationError):
        matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15))


def test_desconto_inativo(matricula_service, aluno, plano, fabrica):
    desconto = fabrica.desconto(status=StatusCadastro.INATIVO)
    with pytest.raises(ValidationError):
        matricula_service.criar(
            aluno_id=aluno.id, plano_id=plano.id, desconto_id=desconto.id, data_inicio=date(2024, 3, 15),
        )


def test_referencias_inexistentes(matricula_service, aluno, plano):
    with pytest.raises(NotFoundError):
        matricula_service.criar(aluno_id=999, plano_id=plano.id, data_inicio=date(2024, 3, 15))
    with pytest.raises(NotFoundError):
        matricula_service.criar(aluno_id=aluno.id, plano_id=999, data_inicio=date(2024, 3, 15))
    with pytest.raises(NotFoundError):
        matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, turma_id=999, data_inicio=date(2024, 3, 15))


def test_dia_vencimento_fora_da_faixa(matricula_service, aluno, plano):
    with pytest.raises(ValidationError):
        matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15), dia_vencimento=32)


def test_desconto_maior_que_plano_nao_grava_nada(db, matricula_service, aluno, fabrica):
    plano = fabrica.plano(valor="50.00")
    desconto = fabrica.desconto(valor="80", tipo=TipoDesconto.MONETARIO)

    with pytest.raises(ValidationError):
        matricula_service.criar(
            aluno_id=aluno.id, plano_id=plano.id, desconto_id=desconto.id, data_inicio=date(2024, 3, 15),
        )
    assert db.query(Matricula).count() == 0
    assert db.query(ContaReceber).count() == 0


def test_falha_na_primeira_conta_desfaz_a_matricula(db, monkeypatch, matricula_service, aluno, plano):
    def falhar(*args, **kwargs):
        raise RuntimeError("falha ao criar conta")

    monkeypatch.setattr(ContaReceberService, "_criar", falhar)

    with pytest.raises(RuntimeError):
        matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15))
    assert db.query(Matricula).count() == 0


def test_calcular_valores_percentual(fabrica):
    plano = fabrica.plano(valor="200.00")
    desconto = fabrica.desconto(valor="15", tipo=TipoDesconto.PERCENTUAL)

    valores = calcular_valores(plano, desconto)

    assert valores == {
        "valor_matricula": Decimal("200.00"),
        "valor_desconto": Decimal("30.00"),
        "valor_final": Decimal("170.00"),
    }


def test_atualizar_plano_recalcula_valores(matricula_service, aluno, plano, fabrica):
    matricula = matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15))["matricula"]
    trimestral = fabrica.plano(valor="400.00", periodicidade=Periodicidade.TRIMESTRAL)

    atualizada = matricula_service.atualizar(matricula.id, {"plano_id": trimestral.id})

    assert atualizada.plano_id == trimestral.id
    assert atualizada.valor_final == Decimal("400.00")
    assert atualizada.data_fim == date(2024, 6, 15)
    assert atualizada.dia_vencimento == 15


def test_atualizar_forma_pagamento_invalida(matricula_service, aluno, plano):
    matricula = matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15))["matricula"]
    with pytest.raises(ValidationError):
        matricula_service.atualizar(matricula.id, {"forma_pagamento": "FIADO"})


def test_inativar_e_reativar(matricula_service, aluno, plano):
    matricula = matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15))["matricula"]

    with pytest.raises(ValidationError):
        matricula_service.inativar(matricula.id, "")

    inativa = matricula_service.inativar(matricula.id, "Mudou de cidade")
    assert inativa.situacao == SituacaoMatricula.INATIVA
    assert inativa.motivo_inativacao == "Mudou de cidade"
    with pytest.raises(InvalidStateError):
        matricula_service.inativar(matricula.id, "De novo")

    ativa = matricula_service.reativar(matricula.id)
    assert ativa.situacao == SituacaoMatricula.ATIVA
    assert ativa.motivo_inativacao is None
    assert len(ativa.historico) == 3
    with pytest.raises(InvalidStateError):
        matricula_service.reativar(matricula.id)


def test_deletar_sem_pagamentos(db, matricula_service, aluno, plano):
    matricula = matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15))["matricula"]

    matricula_service.deletar(matricula.id)

    assert db.query(Matricula).count() == 0
    assert db.query(ContaReceber).count() == 0


def test_deletar_com_pagamento(db, matricula_service, receber_service, caixa_aberto, aluno, plano):
    resultado = matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15))
    receber_service.registrar_pagamento(resultado["primeira_conta"].id, Decimal("10"), "PIX")

    with pytest.raises(InvalidStateError):
        matricula_service.deletar(resultado["matricula"].id)
    assert db.query(Matricula).count() == 1


def test_deletar_com_conta_quitada_por_desconto_integral(db, matricula_service, aluno, plano, fabrica):
    bolsa = fabrica.desconto(valor="100", tipo=TipoDesconto.PERCENTUAL, descricao="Bolsa integral")
    resultado = matricula_service.criar(
        aluno_id=aluno.id, plano_id=plano.id, desconto_id=bolsa.id, data_inicio=date(2024, 3, 15),
    )
    assert resultado["primeira_conta"].status == StatusConta.PAGO
    assert resultado["primeira_conta"].valor_pago == 0

    with pytest.raises(InvalidStateError):
        matricula_service.deletar(resultado["matricula"].id)
    assert db.query(Matricula).count() == 1
    assert db.query(ContaReceber).count() == 1


def test_listar_por_situacao(matricula_service, aluno, plano):
    primeira = matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15))["matricula"]
    matricula_service.criar(aluno_id=aluno.id, plano_id=plano.id, data_inicio=date(2024, 3, 15))
    matricula_service.inativar(primeira.id, "Trancou")

    total, matriculas = matricula_service.listar(situacao=SituacaoMatricula.ATIVA)
    assert total == 1
    assert matriculas[0].codigo == "M00002"
