# conselho/uploads.py
from __future__ import annotations

import logging
import os
import secrets
import shutil
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from starlette.datastructures import UploadFile

from conselho.errors import StorageFailure, ValidationFailure

log = logging.getLogger(__name__)

MB = 1024 * 1024


@dataclass(frozen=True)
class UploadPolicy:
    allowed_types: frozenset
    max_bytes: int
    type_error: str
    size_error: str


PDF_POLICY = UploadPolicy(
    allowed_types=frozenset({"application/pdf"}),
    max_bytes=10 * MB,
    type_error="Apenas arquivos PDF são permitidos",
    size_error="Arquivo excede o limite de 10 MB",
)

PHOTO_POLICY = UploadPolicy(
    allowed_types=frozenset(
        {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
    ),
    max_bytes=5 * MB,
    type_error="Apenas imagens são permitidas (JPEG, PNG, GIF, WebP)",
    size_error="Imagem excede o limite de 5 MB",
)


@dataclass(frozen=True)
class StoredUpload:
    reference: str       # /uploads/<nome>, gravado no registro
    filename: str        # nome gerado em disco
    original_name: str


def has_file(upload) -> bool:
    return isinstance(upload, UploadFile) and bool(upload.filename)


def upload_size(upload: UploadFile) -> int:
    f = upload.file
    f.seek(0, os.SEEK_END)
    size = f.tell()
    f.seek(0)
    return size


class UploadStorage:
    """
    Guarda os anexos em ``root`` e os publica em ``url_prefix``.
    A pasta é criada na primeira gravação.
    """

    def __init__(self, root: Path, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")
        self._ready = False
        self._lock = threading.Lock()

    def validate(self, upload: UploadFile, policy: UploadPolicy) -> None:
        if (upload.content_type or "") not in policy.allowed_types:
            raise ValidationFailure(policy.type_error)
        if upload_size(upload) > policy.max_bytes:
            raise ValidationFailure(policy.size_error)

    def ensure_root(self) -> None:
        if self._ready:
            return
        with self._lock:
            if not self._ready:
                self.root.mkdir(parents=True, exist_ok=True)
                self._ready = True

    def save(self, upload: UploadFile, field: str) -> StoredUpload:
        self.ensure_root()

        ext = Path(upload.filename or "").suffix
        unique = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        filename = f"{field}-{unique}{ext}"
        disk_path = self.root / filename

        upload.file.seek(0)
        try:
            with disk_path.open("wb") as out:
                shutil.copyfileobj(upload.file, out)
        except OSError as exc:
            log.error("Falha ao salvar upload %s: %s", filename, exc)
            raise StorageFailure("Erro ao salvar arquivo") from exc

        log.info("Upload salvo: %s (%s)", filename, upload.filename)
        return StoredUpload(
            reference=f"{self.url_prefix}/{filename}",
            filename=filename,
            original_name=upload.filename or filename,
        )

    def resolve(self, reference: str) -> Optional[Path]:
        # Só o nome final conta: a referência nunca sai da pasta de uploads
        name = Path(reference or "").name
        if not name:
            return None
        return self.root / name

    def discard(self, reference: str) -> None:
        path = self.resolve(reference)
        if path is None:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            log.warning("Não foi possível remover upload %s: %s", path.name, exc)
