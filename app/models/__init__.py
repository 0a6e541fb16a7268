from .common import Perfil, StatusEmprestimo
from .usuario import (
    UsuarioResponse,
    UsuarioUpdateRequest,
    RegistroRequest,
    LoginRequest,
    TokenResponse,
)
from .autor import AutorRequest, AutorUpdateRequest, AutorResponse
from .livro import LivroRequest, LivroUpdateRequest, LivroResponse
from .emprestimo import EmprestimoRequest, EmprestimoResponse

__all__ = [
    "Perfil",
    "StatusEmprestimo",
    "UsuarioResponse",
    "UsuarioUpdateRequest",
    "RegistroRequest",
    "LoginRequest",
    "TokenResponse",
    "AutorRequest",
    "AutorUpdateRequest",
    "AutorResponse",
    "LivroRequest",
    "LivroUpdateRequest",
    "LivroResponse",
    "EmprestimoRequest",
    "EmprestimoResponse",
]
