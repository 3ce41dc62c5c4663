# conselho/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from conselho.config import DEFAULT_JWT_SECRET, Settings, get_settings
from conselho.errors import register_exception_handlers
from conselho.store import JsonStore
from conselho.uploads import UploadStorage
from conselho.users import USERS, USERS_NOT_FOUND, UserStore

# Routers
from conselho.routers.auth import router as auth_router
from conselho.routers.users import router as users_router
from conselho.routers.documentos import DOCUMENTOS, NOT_FOUND as DOCUMENTO_NOT_FOUND
from conselho.routers.documentos import router as documentos_router
from conselho.routers.records import RECORD_COLLECTIONS, routers as record_routers


logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
log = logging.getLogger("conselho")

# Mensagem de 404 de cada coleção, fixada ao criar o store
NOT_FOUND_MESSAGES = {
    USERS: USERS_NOT_FOUND,
    DOCUMENTOS: DOCUMENTO_NOT_FOUND,
    **{name: not_found for name, (_, _, not_found) in RECORD_COLLECTIONS.items()},
}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # ==================== CICLO DE VIDA ====================

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Preparando dados em %s e uploads em %s", settings.DATA_DIR, settings.UPLOADS_DIR)
        app.state.users.ensure_seeded(
            settings.DEFAULT_ADMIN_USERNAME, settings.DEFAULT_ADMIN_PASSWORD
        )
        app.state.uploads.ensure_root()
        if settings.JWT_SECRET == DEFAULT_JWT_SECRET:
            log.warning("JWT_SECRET padrão em uso; defina JWT_SECRET no ambiente")
        log.info("%s pronto", settings.APP_NAME)
        yield
        log.info("Encerrando %s...", settings.APP_NAME)

    app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan)

    store = JsonStore(settings.data_path, NOT_FOUND_MESSAGES)
    app.state.settings = settings
    app.state.store = store
    app.state.users = UserStore(store)
    app.state.uploads = UploadStorage(settings.uploads_path, settings.UPLOADS_URL)

    register_exception_handlers(app)

    # ==================== MIDDLEWARES ====================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_list(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ==================== ROUTERS ====================
    # Cada rota declara o próprio corpo (JSON ou multipart); não há parser global.

    app.include_router(auth_router)
    app.include_router(users_router)
    for router in record_routers:
        app.include_router(router)
    app.include_router(documentos_router)

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "ok"}

    # ==================== STATIC: UPLOADS ====================
    # Os anexos ficam em UPLOADS_DIR/<arquivo> e são servidos em /uploads/<arquivo>
    app.mount(
        settings.UPLOADS_URL,
        StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False),
        name="uploads",
    )

    # ==================== STATIC: frontend opcional ====================
    public_dir = Path(settings.PUBLIC_DIR)
    if public_dir.exists():
        app.mount("/", StaticFiles(directory=str(public_dir), html=True), name="public")
    else:
        log.info("Pasta public não encontrada em %s", public_dir.resolve())

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("conselho.main:app", host=settings.HOST, port=settings.PORT)


# Arranque direto: python -m conselho.main
if __name__ == "__main__":
    run()
