# conselho/routers/auth.py
import logging

from fastapi import APIRouter, Depends, Request

from conselho.deps import get_users
from conselho.errors import AuthenticationFailure
from conselho.models import LoginIn, LoginOut
from conselho.security import authenticate, create_access_token
from conselho.users import UserStore

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


# -----------------------------
#   LOGIN (corpo JSON)
# -----------------------------
@router.post("/login", response_model=LoginOut)
def login(
    payload: LoginIn,
    request: Request,
    users: UserStore = Depends(get_users),
):
    user = authenticate(users, payload.username, payload.password)

    # Sem bloqueio por tentativas: cada falha só devolve 401
    if not user:
        log.warning("Login recusado para '%s'", payload.username)
        raise AuthenticationFailure()

    token = create_access_token(user, request.app.state.settings)
    log.info("Login de '%s'", user["username"])

    return {"token": token, "user": users.public(user)}
