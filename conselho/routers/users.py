# conselho/routers/users.py
from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from conselho.deps import get_uploads, get_users
from conselho.errors import NotFound, StorageFailure, ValidationFailure
from conselho.models import UserOut
from conselho.security import TokenIdentity, get_current_user
from conselho.uploads import PHOTO_POLICY, UploadStorage, has_file
from conselho.users import USERS_NOT_FOUND, UserStore

router = APIRouter(prefix="/api/users", tags=["Usuários"])

FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


@router.get("/me", response_model=UserOut)
def read_me(
    current_user: TokenIdentity = Depends(get_current_user),
    users: UserStore = Depends(get_users),
):
    user = users.find_by_id(current_user.id)
    if not user:
        raise NotFound(USERS_NOT_FOUND)
    return users.public(user)


def _apply_profile_update(
    user_id: int,
    fields: dict,
    foto,
    users: UserStore,
    uploads: UploadStorage,
) -> dict:
    """Parte síncrona do PUT /me: lock da coleção, arquivo e disco."""
    if not users.find_by_id(user_id):
        raise NotFound(USERS_NOT_FOUND)

    patch = dict(fields)
    stored = None
    if has_file(foto):
        uploads.validate(foto, PHOTO_POLICY)
        stored = uploads.save(foto, "foto")
        patch["foto"] = stored.reference

    try:
        user = users.update_profile(user_id, patch)
    except StorageFailure:
        if stored:
            uploads.discard(stored.reference)
        raise
    return users.public(user)


@router.put("/me", response_model=UserOut)
async def update_me(
    request: Request,
    current_user: TokenIdentity = Depends(get_current_user),
    users: UserStore = Depends(get_users),
    uploads: UploadStorage = Depends(get_uploads),
):
    """
    Atualiza o perfil a partir de um formulário multipart (nomeCompleto,
    telefone, foto). O formulário é lido aqui mesmo porque os parâmetros
    ``Form`` do FastAPI tratam string vazia como campo ausente, e aqui uma
    string vazia precisa limpar o campo. O resto roda no threadpool para
    não travar o event loop.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith(FORM_TYPES):
        raise ValidationFailure("Envie os dados como multipart/form-data")

    async with request.form() as form:
        fields = {
            key: form[key]
            for key in ("nomeCompleto", "telefone")
            if key in form and isinstance(form[key], str)
        }
        # foto só muda com arquivo enviado; um campo texto "foto" é ignorado
        foto = form.get("foto")

        return await run_in_threadpool(
            _apply_profile_update, current_user.id, fields, foto, users, uploads
        )
