"""
DTOs de usuário e autenticação.

- 'UsuarioResponse': dados públicos do usuário (nunca a senha)
- 'UsuarioUpdateRequest': atualização parcial (todos os campos opcionais)
- 'RegistroRequest' / 'LoginRequest' / 'TokenResponse': fluxo de autenticação
"""

from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import Field, field_validator

from app.models.common import CamelModel, DataHora, Perfil

MSG_USUARIO = "Usuário deve ter entre 3 e 50 caracteres"
MSG_EMAIL = "Email inválido"
MSG_SENHA = "Senha deve ter no mínimo 6 caracteres"


def _check_usuario(value: Optional[str]) -> Optional[str]:
    if value is not None and not 3 <= len(value) <= 50:
        raise ValueError(MSG_USUARIO)
    return value


def _check_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(MSG_EMAIL)
    return value


def _check_senha(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) < 6:
        raise ValueError(MSG_SENHA)
    return value


class UsuarioResponse(CamelModel):
    """Resposta com dados do usuário."""
    id: int = Field(..., description="ID único do usuário", examples=[1])
    usuario: str = Field(..., description="Nome de usuário", examples=["joao123"])
    nome: str = Field(..., description="Nome completo do usuário", examples=["João Silva"])
    email: str = Field(..., description="E-mail do usuário", examples=["joao@email.com"])
    perfil: Perfil = Field(..., description="Perfil/Role do usuário", examples=["USER"])
    status: str = Field(..., description="Status do usuário", examples=["Ativo"])
    data_criacao: DataHora = Field(
        ..., description="Data de criação do usuário", examples=["2025-11-10T19:30:00"]
    )

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "UsuarioResponse":
        return cls(
            id=row["id"],
            usuario=row["usuario"],
            nome=row["nome"],
            email=row["email"],
            perfil=row["perfil"],
            status="Ativo" if row["ativo"] else "Inativo",
            data_criacao=row["data_criacao"],
        )


class UsuarioUpdateRequest(CamelModel):
    """Requisição para atualização de dados do usuário."""
    usuario: Optional[str] = Field(
        None,
        description="Nome de usuário",
        examples=["joao123"],
        json_schema_extra={"minLength": 3, "maxLength": 50},
    )
    nome: Optional[str] = Field(None, description="Nome completo do usuário", examples=["João Silva"])
    email: Optional[str] = Field(
        None,
        description="E-mail do usuário",
        examples=["joao@email.com"],
        json_schema_extra={"format": "email"},
    )
    perfil: Optional[Perfil] = Field(None, description="Perfil/Role do usuário", examples=["USER"])
    ativo: Optional[bool] = Field(None, description="Status ativo do usuário", examples=[True])
    senha: Optional[str] = Field(
        None,
        description="Nova senha (opcional)",
        examples=["novaSenha123"],
        json_schema_extra={"minLength": 6},
    )

    @field_validator("usuario")
    @classmethod
    def validar_usuario(cls, value):
        return _check_usuario(value)

    @field_validator("email")
    @classmethod
    def validar_email(cls, value):
        return _check_email(value)

    @field_validator("senha")
    @classmethod
    def validar_senha(cls, value):
        return _check_senha(value)


class RegistroRequest(CamelModel):
    """
    Payload para registro.
    - `usuario`: Nome único (3..50)
    - `nome`: Nome completo
    - `email`: E-mail único
    - `senha`: Senha (>=6)
    """
    usuario: str = Field(..., examples=["joao123"], json_schema_extra={"minLength": 3, "maxLength": 50})
    nome: str = Field(..., min_length=1, max_length=100, examples=["João Silva"])
    email: str = Field(..., examples=["joao@email.com"], json_schema_extra={"format": "email"})
    senha: str = Field(..., examples=["senha123"], json_schema_extra={"minLength": 6})

    @field_validator("usuario")
    @classmethod
    def validar_usuario(cls, value):
        return _check_usuario(value)

    @field_validator("email")
    @classmethod
    def validar_email(cls, value):
        return _check_email(value)

    @field_validator("senha")
    @classmethod
    def validar_senha(cls, value):
        return _check_senha(value)


class LoginRequest(CamelModel):
    """
    Payload para login.
    """
    usuario: str = Field(..., examples=["joao123"])
    senha: str = Field(..., examples=["senha123"])


class TokenResponse(CamelModel):
    """
    Resposta de autenticação.
    """
    access_token: str
    token_type: str = "Bearer"
    expira_em: int = Field(..., description="Validade do token em segundos")
    usuario: UsuarioResponse
