# -*- coding: utf-8 -*-
"""
Configurações da aplicação lidas das variáveis de ambiente (ou de um arquivo .env).
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _bool(valor, padrao=False):
    if valor is None:
        return padrao
    return valor.strip().lower() in ("1", "true", "sim", "yes", "on")


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./academia.db")
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 8))

    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5700")

    SCHEDULER_ENABLED = _bool(os.getenv("SCHEDULER_ENABLED"), padrao=True)
    SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "America/Sao_Paulo")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE") or None

    def __init__(self):
        # Render/Heroku entregam o prefixo antigo do PostgreSQL
        if self.DATABASE_URL.startswith("postgres://"):
            self.DATABASE_URL = self.DATABASE_URL.replace("postgres://", "postgresql://", 1)

    @property
    def is_production(self):
        return self.ENVIRONMENT == "production"


settings = Settings()
