# conselho/store.py
"""
Persistência em arquivos JSON: cada coleção é um array de registros em
``<DATA_DIR>/<nome>.json``.

Toda operação relê o arquivo inteiro, calcula o novo estado e regrava o
arquivo inteiro. Nada fica em memória entre requisições. Dentro de um mesmo
processo o ciclo ler-alterar-gravar de cada coleção é serializado por um
lock; vários processos gravando o mesmo DATA_DIR não são suportados.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from conselho.errors import NotFound, StorageFailure

log = logging.getLogger(__name__)

# Campos controlados pelo store; valores vindos do cliente são ignorados
RESERVED_FIELDS = frozenset({"id", "createdAt", "createdBy", "updatedAt"})


def utcnow_iso() -> str:
    """Timestamp ISO-8601 em UTC com milissegundos e sufixo Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def next_id(records: list[dict]) -> int:
    ids = [r["id"] for r in records if isinstance(r.get("id"), int)]
    return max(ids) + 1 if ids else 1


def _clean(fields: dict) -> dict:
    return {k: v for k, v in fields.items() if k not in RESERVED_FIELDS}


class JsonCollection:
    def __init__(self, path: Path, not_found_message: str = NotFound.message):
        self.path = path
        self.name = path.stem
        self.not_found_message = not_found_message
        self._lock = threading.RLock()

    def exists(self) -> bool:
        return self.path.exists()

    # ============== LEITURA ==============

    def read_all(self) -> list[dict]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as exc:
            log.warning("Coleção %s ilegível (%s); tratando como vazia", self.name, exc)
            return []

        if not isinstance(data, list):
            log.warning("Coleção %s não é um array JSON; tratando como vazia", self.name)
            return []
        return data

    def get(self, record_id: int) -> Optional[dict]:
        for record in self.read_all():
            if record.get("id") == record_id:
                return record
        return None

    # ============== ESCRITA ==============

    def write_all(self, records: list[dict]) -> None:
        """Grava em arquivo temporário e troca com os.replace."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.name}-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            log.error("Falha ao gravar coleção %s: %s", self.name, exc)
            raise StorageFailure() from exc

    def insert(self, fields: dict, created_by: Any = None) -> dict:
        with self._lock:
            records = self.read_all()
            record = {
                "id": next_id(records),
                **_clean(fields),
                "createdAt": utcnow_iso(),
                "createdBy": created_by,
            }
            records.append(record)
            self.write_all(records)
        return record

    def update(self, record_id: int, fields: dict) -> dict:
        with self._lock:
            records = self.read_all()
            for index, record in enumerate(records):
                if record.get("id") == record_id:
                    merged = {**record, **_clean(fields), "updatedAt": utcnow_iso()}
                    records[index] = merged
                    self.write_all(records)
                    return merged
        raise NotFound(self.not_found_message)

    def remove(self, record_id: int) -> dict:
        return self.remove_with_file(record_id, None)

    def remove_with_file(
        self,
        record_id: int,
        file_field: Optional[str],
        resolve: Optional[Callable[[str], Optional[Path]]] = None,
    ) -> dict:
        """
        Remove o registro e, se ``file_field`` for informado, apaga antes o
        arquivo referenciado (melhor esforço: arquivo ausente não é erro).
        """
        with self._lock:
            records = self.read_all()
            target = next((r for r in records if r.get("id") == record_id), None)
            if target is None:
                raise NotFound(self.not_found_message)

            if file_field and resolve and target.get(file_field):
                _unlink_quietly(resolve(target[file_field]))

            self.write_all([r for r in records if r.get("id") != record_id])
        return target


def _unlink_quietly(path: Optional[Path]) -> None:
    if path is None:
        return
    try:
        path.unlink(missing_ok=True)
        log.info("Arquivo removido: %s", path.name)
    except OSError as exc:
        # Se falha a remoção física não derrubamos a requisição
        log.warning("Não foi possível remover %s: %s", path.name, exc)


class JsonStore:
    """
    Registro das coleções de um DATA_DIR; guarda só os locks, não os dados.
    As mensagens de 404 por coleção são fixadas na construção.
    """

    def __init__(self, data_dir: Path, not_found_messages: Optional[dict[str, str]] = None):
        self.data_dir = Path(data_dir)
        self.not_found_messages = dict(not_found_messages or {})
        self._collections: dict[str, JsonCollection] = {}
        self._guard = threading.Lock()

    def collection(self, name: str) -> JsonCollection:
        with self._guard:
            coll = self._collections.get(name)
            if coll is None:
                coll = JsonCollection(
                    self.data_dir / f"{name}.json",
                    self.not_found_messages.get(name, NotFound.message),
                )
                self._collections[name] = coll
        return coll

    def ensure_collections(self, names) -> None:
        for name in names:
            coll = self.collection(name)
            if not coll.exists():
                coll.write_all([])
