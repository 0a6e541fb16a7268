from typing import Any, Dict, Optional

from pydantic import Field

from app.models.common import CamelModel, Data, DataHora


class AutorRequest(CamelModel):
    """Cadastro de autor."""
    nome: str = Field(..., min_length=2, max_length=100, examples=["Machado de Assis"])
    nacionalidade: Optional[str] = Field(None, max_length=50, examples=["Brasileira"])
    data_nascimento: Optional[Data] = Field(None, examples=["1839-06-21"])
    biografia: Optional[str] = Field(None, max_length=2000)


class AutorUpdateRequest(CamelModel):
    nome: Optional[str] = Field(None, min_length=2, max_length=100)
    nacionalidade: Optional[str] = Field(None, max_length=50)
    data_nascimento: Optional[Data] = None
    biografia: Optional[str] = Field(None, max_length=2000)


class AutorResponse(CamelModel):
    id: int
    nome: str
    nacionalidade: Optional[str] = None
    data_nascimento: Optional[Data] = None
    biografia: Optional[str] = None
    quantidade_livros: int = 0
    data_criacao: DataHora

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AutorResponse":
        return cls(
            id=row["id"],
            nome=row["nome"],
            nacionalidade=row["nacionalidade"],
            data_nascimento=row["data_nascimento"],
            biografia=row["biografia"],
            quantidade_livros=row.get("quantidade_livros") or 0,
            data_criacao=row["data_criacao"],
        )
