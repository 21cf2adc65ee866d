# -*- coding: utf-8 -*-
"""
Erros de regra de negócio do núcleo financeiro e seu mapeamento para HTTP.

Os serviços levantam apenas estas exceções (nunca HTTPException); a camada HTTP
as converte em respostas JSON com `register_exception_handlers`.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base dos erros de domínio. A mensagem é exibida diretamente ao usuário."""
    code = "domain_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message="", *, code=None, status_code=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DomainError):
    """Entrada ausente, malformada ou fora da faixa permitida."""
    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(DomainError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateError(DomainError):
    """Operação não permitida no estado atual da entidade (ex.: pagar conta cancelada)."""
    code = "invalid_state"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(DomainError):
    """Violação de unicidade (ex.: abrir um caixa com outro já aberto)."""
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class PreconditionError(DomainError):
    """Dependência implícita não atendida (ex.: pagamento sem caixa aberto)."""
    code = "precondition_failed"
    status_code = status.HTTP_409_CONFLICT


def _resposta(status_code, code, message):
    return JSONResponse(status_code=status_code, content={"detail": message, "code": code})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError):
        return _resposta(exc.status_code, exc.code, exc.message)

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        logger.warning(f"Violação de integridade em {request.url.path}: {exc.orig}")
        return _resposta(
            status.HTTP_409_CONFLICT,
            ConflictError.code,
            "Operação conflita com um registro existente."
        )
