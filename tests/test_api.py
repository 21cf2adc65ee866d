from datetime import date
from decimal import Decimal

import pytest

from gestao import auth
from gestao.services.contas_service import ContaReceberService


@pytest.fixture
def aluno_id(client):
    response = client.post("/api/v1/alunos", json={"nome": "Ana Lima", "cpf": "12345678900"})
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def plano_id(client):
    response = client.post("/api/v1/planos", json={
        "nome": "Jiu-Jitsu Mensal",
        "periodicidade": "MENSAL",
        "tipo_cobranca": "RECORRENTE",
        "valor": 150,
    })
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def matricula(client, aluno_id, plano_id):
    response = client.post("/api/v1/matriculas", json={
        "aluno_id": aluno_id, "plano_id": plano_id, "data_inicio": "2024-03-15",
    })
    assert response.status_code == 201
    return response.json()


def _abrir_caixa(client, valor=100):
    return client.post("/api/v1/caixas/abrir", json={"valor_abertura": valor})


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["mensagem"] == "API Gestão Academia"


def test_abrir_caixa(client):
    response = _abrir_caixa(client)

    assert response.status_code == 201
    data = response.json()
    assert data["numero"] == "CX00001"
    assert data["status"] == "ABERTO"
    assert data["usuario_abertura"] == "tester"
    assert data["saldo_disponivel"] == 100.0


def test_segundo_caixa_aberto_retorna_conflito(client):
    _abrir_caixa(client)
    response = _abrir_caixa(client, 50)

    assert response.status_code == 409
    assert response.json()["code"] == "conflict"


def test_sem_caixa_aberto(client):
    response = client.get("/api/v1/caixas/aberto")
    assert response.status_code == 404
    assert response.json() == {"detail": "Nenhum caixa aberto", "code": "not_found"}


def test_sangria_maior_que_saldo(client):
    caixa_id = _abrir_caixa(client).json()["id"]

    ok = client.post(f"/api/v1/caixas/{caixa_id}/sangria", json={"valor": 30, "descricao": "Depósito"})
    assert ok.status_code == 201
    assert ok.json()["valor"] == 30.0

    response = client.post(f"/api/v1/caixas/{caixa_id}/sangria", json={"valor": 80, "descricao": "Depósito"})
    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"
    assert client.get(f"/api/v1/caixas/{caixa_id}").json()["saldo_disponivel"] == 70.0


def test_fechar_caixa(client):
    caixa_id = _abrir_caixa(client).json()["id"]

    response = client.post(f"/api/v1/caixas/{caixa_id}/fechar", json={"valor_fechamento": 90})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "FECHADO"
    assert data["diferenca"] == -10.0
    assert "FALTA: R$ 10.00" in data["observacoes"]


def test_matricula_e_pagamento(client, matricula):
    conta = matricula["primeira_conta"]
    assert matricula["matricula"]["codigo"] == "M00001"
    assert conta["numero"] == "CR00001"
    assert conta["valor_final"] == 150.0
    assert conta["data_vencimento"] == "2024-03-15"

    sem_caixa = client.post(f"/api/v1/contas-receber/{conta['id']}/pagar",
                            json={"valor_pago": 150, "forma_pagamento": "PIX"})
    assert sem_caixa.status_code == 409
    assert sem_caixa.json()["code"] == "precondition_failed"

    caixa_id = _abrir_caixa(client).json()["id"]
    response = client.post(f"/api/v1/contas-receber/{conta['id']}/pagar",
                           json={"valor_pago": 150, "forma_pagamento": "PIX"})
    assert response.status_code == 200
    assert response.json()["status"] == "PAGO"
    assert response.json()["data_pagamento"] == "2024-03-15"

    relatorio = client.get(f"/api/v1/caixas/{caixa_id}/relatorio").json()
    assert relatorio["valores"]["total_entradas"] == 150.0
    assert relatorio["valores"]["saldo_esperado"] == 250.0
    assert relatorio["detalhes"]["entradas_por_forma_pagamento"]["PIX"]["quantidade"] == 1


def test_pagamento_acima_do_restante(client, matricula):
    _abrir_caixa(client)
    conta_id = matricula["primeira_conta"]["id"]

    response = client.post(f"/api/v1/contas-receber/{conta_id}/pagar",
                           json={"valor_pago": 151, "forma_pagamento": "PIX"})

    assert response.status_code == 400
    assert client.get(f"/api/v1/contas-receber/{conta_id}").json()["valor_pago"] == 0.0


def test_pagamento_sem_valor_e_rejeitado_pelo_schema(client, matricula):
    response = client.post(f"/api/v1/contas-receber/{matricula['primeira_conta']['id']}/pagar",
                           json={"forma_pagamento": "PIX"})
    assert response.status_code == 422


def test_cancelar_exige_papel_de_gestao(app, client, fabrica, matricula):
    recepcao = fabrica.usuario(username="recepcao", role="recepcionista")
    app.dependency_overrides[auth.get_current_user] = lambda: recepcao

    response = client.patch(f"/api/v1/contas-receber/{matricula['primeira_conta']['id']}/cancelar",
                            json={"motivo": "Desistência"})

    assert response.status_code == 403


def test_usuario_pendente_nao_acessa(app, client, fabrica):
    pendente = fabrica.usuario(username="novo", role="pendente")
    app.dependency_overrides[auth.get_current_user] = lambda: pendente

    assert client.get("/api/v1/caixas").status_code == 403


def test_cancelar_conta(client, matricula):
    response = client.patch(f"/api/v1/contas-receber/{matricula['primeira_conta']['id']}/cancelar",
                            json={"motivo": "Desistência"})
    assert response.status_code == 200
    assert response.json()["status"] == "CANCELADO"


def test_conta_de_outra_empresa_retorna_404(client, db, outra_empresa, fabrica_outra, relogio):
    aluno = fabrica_outra.aluno("Aluno de outra academia")
    conta = ContaReceberService(db, outra_empresa.id, relogio).criar(
        aluno_id=aluno.id, valor_original=Decimal("10"), data_vencimento=date(2024, 3, 20),
    )

    response = client.get(f"/api/v1/contas-receber/{conta.id}")

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_plano_unico_mensal_e_invalido(client):
    response = client.post("/api/v1/planos", json={
        "nome": "Avulso", "periodicidade": "MENSAL", "tipo_cobranca": "UNICA", "valor": 50,
    })
    assert response.status_code == 400


def test_codigo_do_plano_gerado(client, plano_id):
    assert client.get(f"/api/v1/planos/{plano_id}").json()["codigo"] == "P0001"


def test_desconto_percentual_acima_de_100(client):
    response = client.post("/api/v1/descontos", json={"descricao": "Bolsa", "tipo": "PERCENTUAL", "valor": 120})
    assert response.status_code == 400


def test_aluno_com_matricula_nao_pode_ser_excluido(client, aluno_id, matricula):
    response = client.delete(f"/api/v1/alunos/{aluno_id}")
    assert response.status_code == 400


def test_job_de_cobrancas_recorrentes(client, matricula):
    response = client.post("/api/v1/jobs/cobrancas-recorrentes", params={"data_referencia": "2024-04-01"})

    assert response.status_code == 200
    data = response.json()
    assert data["geradas"] == 1
    assert data["detalhes"][0]["competencia"] == "04/2024"

    contas = client.get("/api/v1/contas-receber", params={"matricula_id": matricula["matricula"]["id"]}).json()
    assert contas["total"] == 2


def test_job_de_vencidas(client, matricula):
    response = client.post("/api/v1/jobs/atualizar-vencidas")
    assert response.status_code == 200
    assert response.json() == {"contas_receber": 0, "contas_pagar": 0}


def test_contas_pagar_parcelado_e_relatorio(client):
    response = client.post("/api/v1/contas-pagar/parcelado", json={
        "total_parcelas": 2,
        "valor_total": 100,
        "data_vencimento_primeira": "2024-04-10",
        "categoria": "EQUIPAMENTO",
        "descricao": "Sacos de pancada",
    })
    assert response.status_code == 201
    assert [c["valor_final"] for c in response.json()] == [50.0, 50.0]

    relatorio = client.get("/api/v1/contas-pagar/relatorio-totais")
    assert relatorio.status_code == 200
    assert relatorio.json() == {"categorias": [], "total_geral": 0.0}


def test_login_e_me(app, client, fabrica):
    fabrica.usuario(username="gerente", role="gerente", senha="s3nha-forte")
    app.dependency_overrides.pop(auth.get_current_user)

    errado = client.post("/api/v1/auth/token", data={"username": "gerente", "password": "errada"})
    assert errado.status_code == 401

    response = client.post("/api/v1/auth/token", data={"username": "gerente", "password": "s3nha-forte"})
    assert response.status_code == 200
    token = response.json()["access_token"]
    assert response.json()["user_info"]["role"] == "gerente"

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == "gerente"

    assert client.get("/api/v1/caixas").status_code == 401


@pytest.mark.parametrize("caminho, metodo", [
    ("/api/v1/caixas/abrir", "post"),
    ("/api/v1/caixas/{caixa_id}/sangria", "post"),
    ("/api/v1/contas-receber/{conta_id}/pagar", "post"),
    ("/api/v1/contas-pagar/parcelado", "post"),
    ("/api/v1/matriculas", "post"),
    ("/api/v1/jobs/cobrancas-recorrentes", "post"),
])
def test_rotas_financeiras_documentadas(app, caminho, metodo):
    operacao = app.openapi()["paths"][caminho][metodo]
    assert operacao.get("description")
