# conselho/errors.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger(__name__)


class AppError(Exception):
    """Erro de domínio com status HTTP e mensagem curta para o cliente."""

    status_code = 500
    message = "Erro interno do servidor"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class AuthenticationFailure(AppError):
    status_code = 401
    message = "Usuário ou senha inválidos"


class MissingCredential(AppError):
    status_code = 401
    message = "Token não fornecido"


class InvalidCredential(AppError):
    status_code = 403
    message = "Token inválido"


class NotFound(AppError):
    status_code = 404
    message = "Registro não encontrado"


class ValidationFailure(AppError):
    status_code = 400
    message = "Dados inválidos"


class StorageFailure(AppError):
    status_code = 500
    message = "Erro ao gravar dados"


def err(msg: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": msg})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return err(msg=exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # exc.detail pode ser str/dict/list
        msg = exc.detail if isinstance(exc.detail, str) else "Falha na requisição"
        return err(msg=msg, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return err(msg=ValidationFailure.message, status_code=ValidationFailure.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        log.exception("Erro não tratado em %s %s", request.method, request.url.path)
        return err(msg=AppError.message, status_code=500)
