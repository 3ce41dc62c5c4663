# conselho/models/records.py
from typing import Optional

from pydantic import BaseModel, ConfigDict


class RecordPatch(BaseModel):
    """
    Corpo JSON de criação/edição. Todos os campos são opcionais e campos
    extras são aceitos; o merge usa só o que veio no corpo
    (``model_dump(exclude_unset=True)``).
    """
    model_config = ConfigDict(extra="allow")

    def fields(self) -> dict:
        return self.model_dump(exclude_unset=True)


class RecepcaoIn(RecordPatch):
    nome: Optional[str] = None
    cpf: Optional[str] = None
    telefone: Optional[str] = None
    motivo: Optional[str] = None


class AtendimentoIn(RecordPatch):
    requerente: Optional[str] = None
    data: Optional[str] = None          # datetime-local do formulário
    tipo: Optional[str] = None
    status: Optional[str] = None
    descricao: Optional[str] = None
    responsavel: Optional[str] = None


class CasoIn(RecordPatch):
    numero: Optional[str] = None
    dataAbertura: Optional[str] = None
    requerente: Optional[str] = None
    cpfCnpj: Optional[str] = None
    status: Optional[str] = None
    prioridade: Optional[str] = None    # baixa, media, alta, urgente
    descricao: Optional[str] = None
