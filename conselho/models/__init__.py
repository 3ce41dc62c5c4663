# conselho/models/__init__.py

# Registros JSON (recepção, atendimentos, casos)
from .records import RecordPatch, RecepcaoIn, AtendimentoIn, CasoIn

# Usuários / login
from .user import LoginIn, LoginOut, UserOut

# Documentos (PDF)
from .documents import DocumentOut, DeleteOut, DEFAULT_DOCUMENT_TYPE


__all__ = [
    # Registros
    "RecordPatch",
    "RecepcaoIn",
    "AtendimentoIn",
    "CasoIn",

    # Usuários
    "LoginIn",
    "LoginOut",
    "UserOut",

    # Documentos
    "DocumentOut",
    "DeleteOut",
    "DEFAULT_DOCUMENT_TYPE",
]
