# -*- coding: utf-8 -*-
"""
Base dos serviços do núcleo financeiro.

Cada serviço recebe explicitamente a sessão do banco, a empresa (inquilino) e o
relógio; toda consulta passa por `_query`, que aplica o filtro da empresa.
"""
from contextlib import contextmanager

from sqlalchemy.orm import Session

from gestao.exceptions import NotFoundError
from gestao.services import sequencias
from gestao.utils.relogio import Relogio


class ServicoEmpresa:

    def __init__(self, db: Session, empresa_id: int, relogio: Relogio = None):
        if empresa_id is None:
            raise ValueError("empresa_id é obrigatório")
        self.db = db
        self.empresa_id = empresa_id
        self.relogio = relogio or Relogio()

    def _query(self, modelo):
        return self.db.query(modelo).filter(modelo.empresa_id == self.empresa_id)

    def _buscar(self, modelo, id, mensagem, bloquear=False):
        query = self._query(modelo).filter(modelo.id == id)
        if bloquear:
            query = query.with_for_update()
        registro = query.first()
        if registro is None:
            raise NotFoundError(mensagem)
        return registro

    def _proximo_numero(self, serie, largura=5):
        return sequencias.proximo_numero(self.db, self.empresa_id, serie, largura)

    @contextmanager
    def _transacao(self):
        """Confirma tudo o que foi feito no bloco, ou desfaz tudo se algo falhar."""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
