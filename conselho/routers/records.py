# conselho/routers/records.py
# Sem "from __future__ import annotations": o FastAPI precisa ler o tipo
# ``schema`` do corpo em tempo de definição das rotas.
from fastapi import APIRouter, Depends

from conselho.deps import get_store
from conselho.errors import NotFound
from conselho.models import AtendimentoIn, CasoIn, DeleteOut, RecepcaoIn, RecordPatch
from conselho.security import TokenIdentity, get_current_user
from conselho.store import JsonStore

# coleção -> (schema do corpo, tag, mensagem de 404)
RECORD_COLLECTIONS = {
    "recepcao": (RecepcaoIn, "Recepção", "Registro não encontrado"),
    "atendimentos": (AtendimentoIn, "Atendimentos", "Atendimento não encontrado"),
    "casos": (CasoIn, "Casos", "Caso não encontrado"),
}


def build_record_router(name: str, schema: type[RecordPatch], tag: str, not_found: str) -> APIRouter:
    """CRUD JSON de uma coleção: listar, ver, criar, editar e excluir."""
    router = APIRouter(prefix=f"/api/{name}", tags=[tag])

    def collection(store: JsonStore):
        return store.collection(name)

    @router.get("")
    def list_records(
        store: JsonStore = Depends(get_store),
        current_user: TokenIdentity = Depends(get_current_user),
    ):
        return collection(store).read_all()

    @router.get("/{record_id}")
    def get_record(
        record_id: int,
        store: JsonStore = Depends(get_store),
        current_user: TokenIdentity = Depends(get_current_user),
    ):
        record = collection(store).get(record_id)
        if record is None:
            raise NotFound(not_found)
        return record

    @router.post("")
    def create_record(
        payload: schema,
        store: JsonStore = Depends(get_store),
        current_user: TokenIdentity = Depends(get_current_user),
    ):
        return collection(store).insert(payload.fields(), created_by=current_user.id)

    @router.put("/{record_id}")
    def update_record(
        record_id: int,
        payload: schema,
        store: JsonStore = Depends(get_store),
        current_user: TokenIdentity = Depends(get_current_user),
    ):
        return collection(store).update(record_id, payload.fields())

    @router.delete("/{record_id}", response_model=DeleteOut)
    def delete_record(
        record_id: int,
        store: JsonStore = Depends(get_store),
        current_user: TokenIdentity = Depends(get_current_user),
    ):
        collection(store).remove(record_id)
        return {"success": True}

    return router


routers = [
    build_record_router(name, schema, tag, not_found)
    for name, (schema, tag, not_found) in RECORD_COLLECTIONS.items()
]