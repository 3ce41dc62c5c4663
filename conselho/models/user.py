# conselho/models/user.py
from pydantic import BaseModel


class LoginIn(BaseModel):
    username: str
    password: str


class UserOut(BaseModel):
    id: int
    username: str
    nomeCompleto: str = ""
    telefone: str = ""
    foto: str = ""
    role: str = "admin"


class LoginOut(BaseModel):
    token: str
    user: UserOut
