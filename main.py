# -*- coding: utf-8 -*-
"""
Arquivo principal da aplicação FastAPI de gestão da academia.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import create_first_user
from gestao import models  # noqa: F401  (registra todos os modelos no Base)
from gestao.config import settings
from gestao.database import Base, engine
from gestao.exceptions import register_exception_handlers
from gestao.jobs.scheduler import AgendadorFinanceiro
from gestao.routes import (
    alunos_fastapi, auth_fastapi, caixas_fastapi, contas_pagar_fastapi, contas_receber_fastapi,
    descontos_fastapi, funcionarios_fastapi, jobs_fastapi, matriculas_fastapi, planos_fastapi,
    turmas_fastapi,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=settings.LOG_FILE
)
logger = logging.getLogger(__name__)

agendador = AgendadorFinanceiro()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Cria as tabelas no banco de dados com tratamento de erros
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Tabelas criadas com sucesso!")
    except Exception as e:
        logger.error(f"Erro ao criar tabelas: {e}")

    create_first_user.create_first_user()

    if settings.SCHEDULER_ENABLED:
        agendador.start()
    yield
    agendador.stop()


docs_url = "/docs" if not settings.is_production else None
redoc_url = "/redoc" if not settings.is_production else None

# Inicializa a aplicação FastAPI
app = FastAPI(
    title="API Gestão Academia",
    description="API de gestão da academia: cadastros, matrículas, contas e caixa",
    version="2.0.0",
    docs_url=docs_url,   # Será None em produção (desativa /docs)
    redoc_url=redoc_url,
    openapi_url="/openapi.json" if not settings.is_production else None,
    lifespan=lifespan,
)

origins = [
    settings.FRONTEND_URL,
    "http://localhost:5700",
    "http://localhost",
    "http://localhost:8080",
    "http://127.0.0.1",
    "http://127.0.0.1:8080",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Montagem dos routers
app.include_router(alunos_fastapi.router, prefix="/api/v1/alunos")
app.include_router(funcionarios_fastapi.router, prefix="/api/v1/funcionarios")
app.include_router(turmas_fastapi.router, prefix="/api/v1/turmas")
app.include_router(planos_fastapi.router, prefix="/api/v1/planos")
app.include_router(descontos_fastapi.router, prefix="/api/v1/descontos")
app.include_router(matriculas_fastapi.router, prefix="/api/v1/matriculas")
app.include_router(contas_receber_fastapi.router, prefix="/api/v1/contas-receber")
app.include_router(contas_pagar_fastapi.router, prefix="/api/v1/contas-pagar")
app.include_router(caixas_fastapi.router, prefix="/api/v1/caixas")
app.include_router(jobs_fastapi.router, prefix="/api/v1/jobs")
app.include_router(auth_fastapi.router)


@app.get("/", tags=["Root"])
async def root():
    return {
        "mensagem": "API Gestão Academia",
        "documentacao": "/docs",
        "endpoints": [
            {"alunos": "/api/v1/alunos"},
            {"funcionarios": "/api/v1/funcionarios"},
            {"turmas": "/api/v1/turmas"},
            {"planos": "/api/v1/planos"},
            {"descontos": "/api/v1/descontos"},
            {"matriculas": "/api/v1/matriculas"},
            {"contas_receber": "/api/v1/contas-receber"},
            {"contas_pagar": "/api/v1/contas-pagar"},
            {"caixas": "/api/v1/caixas"},
            {"jobs": "/api/v1/jobs"},
        ]
    }
