from .auth_domain import AuthDomain, auth_domain
from .usuario_domain import UsuarioDomain, usuario_domain, is_admin
from .autor_domain import AutorDomain, autor_domain
from .livro_domain import LivroDomain, livro_domain
from .emprestimo_domain import (
    EmprestimoDomain,
    emprestimo_domain,
    calcular_status,
    to_response,
)

__all__ = [
    "AuthDomain",
    "auth_domain",
    "UsuarioDomain",
    "usuario_domain",
    "is_admin",
    "AutorDomain",
    "autor_domain",
    "LivroDomain",
    "livro_domain",
    "EmprestimoDomain",
    "emprestimo_domain",
    "calcular_status",
    "to_response",
]
