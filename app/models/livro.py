"""
DTOs de livro.

O ISBN é normalizado (sem hífens/espaços) e precisa ter 10 ou 13 dígitos;
no ISBN-10 o último caractere pode ser 'X'.
"""

import re
from datetime import date
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from app.models.common import INTEIRO_MAXIMO, CamelModel, DataHora

_ISBN_RE = re.compile(r"^(\d{9}[\dX]|\d{13})$")


def normalizar_isbn(isbn: str) -> str:
    return re.sub(r"[\s-]", "", isbn).upper()


def _check_isbn(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    isbn = normalizar_isbn(value)
    if not _ISBN_RE.match(isbn):
        raise ValueError("ISBN deve ter 10 ou 13 dígitos")
    return isbn


def _check_ano(value: Optional[int]) -> Optional[int]:
    if value is not None and not 1000 <= value <= date.today().year:
        raise ValueError("Ano de publicação inválido")
    return value


class LivroRequest(CamelModel):
    """Cadastro de livro."""
    titulo: str = Field(..., min_length=1, max_length=200, examples=["Dom Casmurro"])
    isbn: str = Field(..., examples=["978-85-359-0277-7"])
    ano_publicacao: Optional[int] = Field(None, examples=[1899])
    editora: Optional[str] = Field(None, max_length=100, examples=["Garnier"])
    autor_id: int = Field(..., ge=1, le=INTEIRO_MAXIMO, examples=[1])
    quantidade_total: int = Field(1, ge=1, le=INTEIRO_MAXIMO, examples=[3])

    @field_validator("isbn")
    @classmethod
    def validar_isbn(cls, value):
        return _check_isbn(value)

    @field_validator("ano_publicacao")
    @classmethod
    def validar_ano(cls, value):
        return _check_ano(value)


class LivroUpdateRequest(CamelModel):
    titulo: Optional[str] = Field(None, min_length=1, max_length=200)
    isbn: Optional[str] = None
    ano_publicacao: Optional[int] = None
    editora: Optional[str] = Field(None, max_length=100)
    autor_id: Optional[int] = Field(None, ge=1, le=INTEIRO_MAXIMO)
    quantidade_total: Optional[int] = Field(None, ge=1, le=INTEIRO_MAXIMO)

    @field_validator("isbn")
    @classmethod
    def validar_isbn(cls, value):
        return _check_isbn(value)

    @field_validator("ano_publicacao")
    @classmethod
    def validar_ano(cls, value):
        return _check_ano(value)


class LivroResponse(CamelModel):
    id: int
    titulo: str
    isbn: str
    ano_publicacao: Optional[int] = None
    editora: Optional[str] = None
    autor_id: int
    autor_nome: str
    quantidade_total: int
    quantidade_disponivel: int
    disponivel: bool
    data_criacao: DataHora

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "LivroResponse":
        return cls(
            id=row["id"],
            titulo=row["titulo"],
            isbn=row["isbn"],
            ano_publicacao=row["ano_publicacao"],
            editora=row["editora"],
            autor_id=row["autor_id"],
            autor_nome=row["autor_nome"],
            quantidade_total=row["quantidade_total"],
            quantidade_disponivel=row["quantidade_disponivel"],
            disponivel=row["quantidade_disponivel"] > 0,
            data_criacao=row["data_criacao"],
        )
