# conselho/models/documents.py
from typing import Any, Optional

from pydantic import BaseModel

DEFAULT_DOCUMENT_TYPE = "modelo"


class DocumentOut(BaseModel):
    id: int
    nome: str
    tipo: str = DEFAULT_DOCUMENT_TYPE
    descricao: str = ""
    arquivo: str            # /uploads/<arquivo>
    nomeArquivo: str
    createdAt: str
    createdBy: Optional[Any] = None


class DeleteOut(BaseModel):
    success: bool = True
