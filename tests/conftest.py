import itertools
from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gestao import auth, database, dependencias, models  # noqa: F401
from gestao.database import Base
from gestao.models.aluno import Aluno
from gestao.models.desconto import Desconto
from gestao.models.empresa import Empresa
from gestao.models.enums import Periodicidade, StatusCadastro, TipoCobranca, TipoDesconto
from gestao.models.funcionario import Funcionario
from gestao.models.plano import Plano
from gestao.models.turma import Turma
from gestao.models.usuario import Usuario
from gestao.services.caixa_service import CaixaService
from gestao.services.contas_service import ContaPagarService, ContaReceberService
from gestao.services.matricula_service import MatriculaService
from gestao.services.sequencias import garantir_sequencias
from gestao.utils.relogio import RelogioFixo

HOJE = date(2024, 3, 15)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def _nova_empresa(db, nome):
    empresa = Empresa(nome=nome, ativa=True)
    db.add(empresa)
    db.flush()
    garantir_sequencias(db, empresa.id)
    db.commit()
    db.refresh(empresa)
    return empresa


@pytest.fixture
def empresa(db):
    return _nova_empresa(db, "Academia Teste")


@pytest.fixture
def outra_empresa(db):
    return _nova_empresa(db, "Outra Academia")


@pytest.fixture
def relogio():
    return RelogioFixo(datetime(2024, 3, 15, 10, 0))


class Fabrica:
    """Cria os cadastros de apoio já confirmados no banco."""

    _contador = itertools.count(1)

    def __init__(self, db, empresa_id):
        self.db = db
        self.empresa_id = empresa_id

    def _salvar(self, registro):
        self.db.add(registro)
        self.db.commit()
        self.db.refresh(registro)
        return registro

    def aluno(self, nome="João da Silva", **campos):
        return self._salvar(Aluno(empresa_id=self.empresa_id, nome=nome, **campos))

    def plano(self, valor="150.00", periodicidade=Periodicidade.MENSAL, tipo_cobranca=TipoCobranca.RECORRENTE,
              status=StatusCadastro.ATIVO, **campos):
        n = next(self._contador)
        campos.setdefault("nome", f"Plano {n}")
        return self._salvar(Plano(
            empresa_id=self.empresa_id,
            codigo=f"T{n:04d}",
            valor=Decimal(valor),
            periodicidade=periodicidade,
            tipo_cobranca=tipo_cobranca,
            status=status,
            **campos
        ))

    def desconto(self, valor="10", tipo=TipoDesconto.PERCENTUAL, status=StatusCadastro.ATIVO, descricao=None):
        n = next(self._contador)
        return self._salvar(Desconto(
            empresa_id=self.empresa_id,
            descricao=descricao or f"Desconto {n}",
            tipo=tipo,
            valor=Decimal(valor),
            status=status,
        ))

    def funcionario(self, nome="Maria Professora", **campos):
        return self._salvar(Funcionario(empresa_id=self.empresa_id, nome=nome, **campos))

    def turma(self, nome="Jiu-Jitsu Adulto", modalidade="Jiu-Jitsu", **campos):
        return self._salvar(Turma(empresa_id=self.empresa_id, nome=nome, modalidade=modalidade, **campos))

    def usuario(self, username="tester", role="administrador", senha=None, **campos):
        return self._salvar(Usuario(
            empresa_id=self.empresa_id,
            username=username,
            email=f"{username}@academia.com.br",
            nome=username.title(),
            role=role,
            hashed_password=auth.get_password_hash(senha) if senha else None,
            **campos
        ))


@pytest.fixture
def fabrica(db, empresa):
    return Fabrica(db, empresa.id)


@pytest.fixture
def fabrica_outra(db, outra_empresa):
    return Fabrica(db, outra_empresa.id)


@pytest.fixture
def caixa_service(db, empresa, relogio):
    return CaixaService(db, empresa.id, relogio)


@pytest.fixture
def receber_service(db, empresa, relogio):
    return ContaReceberService(db, empresa.id, relogio)


@pytest.fixture
def pagar_service(db, empresa, relogio):
    return ContaPagarService(db, empresa.id, relogio)


@pytest.fixture
def matricula_service(db, empresa, relogio):
    return MatriculaService(db, empresa.id, relogio)


@pytest.fixture
def caixa_aberto(caixa_service):
    return caixa_service.abrir(Decimal("100.00"), "recepcao")


# --- API ---

@pytest.fixture
def usuario_logado(fabrica):
    return fabrica.usuario()


@pytest.fixture
def app(db, relogio, usuario_logado):
    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[database.get_db] = override_get_db
    app.dependency_overrides[auth.get_current_user] = lambda: usuario_logado
    app.dependency_overrides[dependencias.get_relogio] = lambda: relogio
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    # sem o bloco `with` o lifespan (create_all no banco real e agendador) não roda
    return TestClient(app)
