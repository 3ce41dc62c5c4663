# conselho/users.py
import logging
from typing import Optional

from conselho.security import hash_password, verify_password
from conselho.store import JsonCollection, JsonStore, utcnow_iso

log = logging.getLogger(__name__)

USERS = "users"
USERS_NOT_FOUND = "Usuário não encontrado"
SEED_COLLECTIONS = ("recepcao", "atendimentos", "casos", "documentos")

# Únicos campos do perfil alteráveis pela API
PROFILE_FIELDS = ("nomeCompleto", "telefone", "foto")
PUBLIC_FIELDS = ("id", "username", "nomeCompleto", "telefone", "foto", "role")


class UserStore:
    def __init__(self, store: JsonStore):
        self.store = store
        self.users: JsonCollection = store.collection(USERS)

    def find_by_username(self, username: str) -> Optional[dict]:
        for user in self.users.read_all():
            if user.get("username") == username:
                return user
        return None

    def find_by_id(self, user_id: int) -> Optional[dict]:
        return self.users.get(user_id)

    def verify_password(self, user: dict, plaintext: str) -> bool:
        return verify_password(plaintext or "", user.get("passwordHash") or "")

    def update_profile(self, user_id: int, patch: dict) -> dict:
        """
        Aplica só as chaves presentes em ``patch``: chave ausente mantém o
        valor atual, string vazia limpa o campo.
        """
        changes = {k: patch[k] for k in PROFILE_FIELDS if k in patch}
        return self.users.update(user_id, changes)

    def ensure_seeded(self, username: str, password: str) -> bool:
        """Cria o admin padrão se ainda não existe arquivo de usuários."""
        seeded = False
        if not self.users.exists():
            self.users.write_all(
                [
                    {
                        "id": 1,
                        "username": username,
                        "passwordHash": hash_password(password),
                        "nomeCompleto": "Administrador",
                        "telefone": "(00) 00000-0000",
                        "foto": "",
                        "role": "admin",
                        "createdAt": utcnow_iso(),
                    }
                ]
            )
            log.info("--- USUÁRIO ADMIN CRIADO: %s ---", username)
            seeded = True

        self.store.ensure_collections(SEED_COLLECTIONS)
        return seeded

    @staticmethod
    def public(user: dict) -> dict:
        return {key: user.get(key, "") for key in PUBLIC_FIELDS}
