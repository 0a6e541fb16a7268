"""
Rotas de autenticação (registro, login e usuário atual).
Usa AuthDomain (PyJWT + passlib[bcrypt]) e retorna JWT no login.
"""

from fastapi import APIRouter, Depends, status

from app.config.security import get_current_user
from app.config.settings import settings
from app.domain.auth_domain import auth_domain
from app.models.usuario import LoginRequest, RegistroRequest, TokenResponse, UsuarioResponse

router = APIRouter(prefix="/api/auth", tags=["Autenticação"])


@router.post("/register", response_model=UsuarioResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegistroRequest):
    """
    Registra um novo usuário com perfil USER.
    """
    created = auth_domain.register_user(req.usuario, req.nome, req.email, req.senha)
    return UsuarioResponse.from_row(created)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest):
    """
    Faz login e retorna um JWT de acesso.
    """
    token, user = auth_domain.login(req.usuario, req.senha)
    return TokenResponse(
        access_token=token,
        expira_em=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        usuario=UsuarioResponse.from_row(user),
    )


@router.get("/me", response_model=UsuarioResponse)
def me(user: dict = Depends(get_current_user)):
    """
    Dados do usuário autenticado.
    """
    return UsuarioResponse.from_row(user)
