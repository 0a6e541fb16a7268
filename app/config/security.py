"""
Módulo de segurança para FastAPI.
Fornece as dependências:
- 'get_current_user': lê o token JWT do header Authorization (Bearer),
  decodifica, valida e retorna o usuário autenticado e ativo.
- 'require_admin': exige perfil ADMIN.

O esquema é registrado no OpenAPI como 'bearerAuth'.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.domain.auth_domain import auth_domain
from app.domain.usuario_domain import is_admin
from app.db.dto.usuario_dto import UsuarioDTO

BEARER_SCHEME_NAME = "bearerAuth"
BEARER_DESCRIPTION = "Insira o token JWT obtido no endpoint /api/auth/login"

security = HTTPBearer(
    auto_error=False,
    scheme_name=BEARER_SCHEME_NAME,
    bearerFormat="JWT",
    description=BEARER_DESCRIPTION,
)
repo = UsuarioDTO()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    """
    Dependency que valida o token e retorna o usuário autenticado.

    - 'credentials': Extraído automaticamente do header Authorization.
    - 'return': Usuário (dict) recuperado do banco.

    - raise: HTTP 401 se:
        * header ausente ou malformado
        * token inválido/expirado
        * usuário não existir mais no banco ou estiver inativo
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Token de autenticação ausente ou inválido")

    payload = auth_domain.decode_token(credentials.credentials)

    # 'sub' guarda o id: o nome de usuário pode ser alterado
    try:
        usuario_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("Token com conteúdo inválido")

    user = repo.get_by_id(usuario_id)
    if not user:
        raise _unauthorized("Usuário não encontrado")
    if not user["ativo"]:
        raise _unauthorized("Usuário inativo")

    return user


def require_admin(user: dict = Depends(get_current_user)) -> dict:
    """
    Dependency que exige perfil ADMIN.

    - raise: HTTP 403 se o usuário autenticado não for administrador
    """
    if not is_admin(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso negado: requer perfil ADMIN",
        )
    return user
