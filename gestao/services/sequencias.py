# -*- coding: utf-8 -*-
"""
Numeração sequencial por empresa (CX00001, CR00001, CP00001, M00001, P0001).

O contador fica na tabela `sequencias` e é incrementado com a linha travada
(SELECT ... FOR UPDATE) dentro da transação de quem pede o número, então dois
pedidos simultâneos nunca recebem o mesmo valor.
"""
from gestao.models.sequencia import Sequencia

SERIES = ("CX", "CR", "CP", "M", "P")


def garantir_sequencias(db, empresa_id):
    """Cria os contadores da empresa. Chamado no cadastro da empresa."""
    existentes = {
        s.serie for s in db.query(Sequencia).filter(Sequencia.empresa_id == empresa_id).all()
    }
    for serie in SERIES:
        if serie not in existentes:
            db.add(Sequencia(empresa_id=empresa_id, serie=serie, valor=0))
    db.flush()


def proximo_numero(db, empresa_id, serie, largura=5):
    sequencia = (
        db.query(Sequencia)
        .filter(Sequencia.empresa_id == empresa_id, Sequencia.serie == serie)
        .with_for_update()
        .first()
    )
    if sequencia is None:
        # Empresa sem contadores pré-criados: a unicidade do número na tabela de destino
        # segura uma eventual corrida nesta primeira criação.
        sequencia = Sequencia(empresa_id=empresa_id, serie=serie, valor=0)
        db.add(sequencia)

    sequencia.valor += 1
    db.flush()
    return f"{serie}{sequencia.valor:0{largura}d}"
