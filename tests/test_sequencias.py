from gestao.models.sequencia import Sequencia
from gestao.services.sequencias import SERIES, garantir_sequencias, proximo_numero


def test_contadores_criados_com_a_empresa(db, empresa):
    series = {s.serie for s in db.query(Sequencia).filter(Sequencia.empresa_id == empresa.id)}
    assert series == set(SERIES)


def test_garantir_sequencias_e_idempotente(db, empresa):
    garantir_sequencias(db, empresa.id)
    db.commit()
    assert db.query(Sequencia).filter(Sequencia.empresa_id == empresa.id).count() == len(SERIES)


def test_numeros_sequenciais_por_serie(db, empresa):
    assert proximo_numero(db, empresa.id, "CR") == "CR00001"
    assert proximo_numero(db, empresa.id, "CR") == "CR00002"
    assert proximo_numero(db, empresa.id, "CP") == "CP00001"
    assert proximo_numero(db, empresa.id, "P", largura=4) == "P0001"


def test_numeracao_independente_por_empresa(db, empresa, outra_empresa):
    assert proximo_numero(db, empresa.id, "CX") == "CX00001"
    assert proximo_numero(db, empresa.id, "CX") == "CX00002"
    assert proximo_numero(db, outra_empresa.id, "CX") == "CX00001"


def test_serie_sem_contador_e_criada_sob_demanda(db, empresa):
    assert proximo_numero(db, empresa.id, "ZZ", largura=3) == "ZZ001"
    assert proximo_numero(db, empresa.id, "ZZ", largura=3) == "ZZ002"
