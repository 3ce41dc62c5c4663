# conselho/routers/documentos.py
from typing import Optional

from fastapi import APIRouter, Depends, Form, UploadFile
from fastapi import File as FastAPIFile   # helper do FastAPI para upload

from conselho.deps import get_store, get_uploads
from conselho.errors import StorageFailure, ValidationFailure
from conselho.models import DEFAULT_DOCUMENT_TYPE, DeleteOut, DocumentOut
from conselho.security import TokenIdentity, get_current_user
from conselho.store import JsonStore
from conselho.uploads import PDF_POLICY, UploadStorage, has_file

router = APIRouter(prefix="/api/documentos", tags=["Documentos"])

DOCUMENTOS = "documentos"
NOT_FOUND = "Documento não encontrado"


@router.get("", response_model=list[DocumentOut])
def list_documentos(
    store: JsonStore = Depends(get_store),
    current_user: TokenIdentity = Depends(get_current_user),
):
    return store.collection(DOCUMENTOS).read_all()


# ============== UPLOAD DE DOCUMENTOS ==============

@router.post("", response_model=DocumentOut)
def create_documento(
    nome: Optional[str] = Form(None),
    tipo: Optional[str] = Form(None),
    descricao: Optional[str] = Form(None),
    arquivo: Optional[UploadFile] = FastAPIFile(None),
    store: JsonStore = Depends(get_store),
    uploads: UploadStorage = Depends(get_uploads),
    current_user: TokenIdentity = Depends(get_current_user),
):
    # Toda validação acontece antes de gravar arquivo ou registro
    nome = (nome or "").strip()
    if not nome:
        raise ValidationFailure("Nome do documento é obrigatório")
    if not has_file(arquivo):
        raise ValidationFailure("Arquivo PDF é obrigatório")
    uploads.validate(arquivo, PDF_POLICY)

    stored = uploads.save(arquivo, "arquivo")
    try:
        return store.collection(DOCUMENTOS).insert(
            {
                "nome": nome,
                "tipo": tipo or DEFAULT_DOCUMENT_TYPE,
                "descricao": (descricao or "").strip(),
                "arquivo": stored.reference,
                "nomeArquivo": stored.original_name,
            },
            created_by=current_user.id,
        )
    except StorageFailure:
        uploads.discard(stored.reference)
        raise


# ============== EXCLUSÃO (registro + arquivo) ==============

@router.delete("/{documento_id}", response_model=DeleteOut)
def delete_documento(
    documento_id: int,
    store: JsonStore = Depends(get_store),
    uploads: UploadStorage = Depends(get_uploads),
    current_user: TokenIdentity = Depends(get_current_user),
):
    store.collection(DOCUMENTOS).remove_with_file(
        documento_id, "arquivo", uploads.resolve
    )
    return {"success": True}
