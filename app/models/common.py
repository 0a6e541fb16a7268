"""
Tipos compartilhados pelos DTOs da API.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

DATA_HORA_FORMATO = "%Y-%m-%dT%H:%M:%S"

# maior valor de um INTEGER do SQLite
INTEIRO_MAXIMO = 2**63 - 1

# LocalDateTime sem frações de segundo, ex.: 2025-11-10T19:30:00
DataHora = Annotated[
    datetime,
    PlainSerializer(lambda v: v.strftime(DATA_HORA_FORMATO), return_type=str),
]

Data = Annotated[date, PlainSerializer(lambda v: v.isoformat(), return_type=str)]


class Perfil(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class StatusEmprestimo(str, Enum):
    ATIVO = "ATIVO"
    ATRASADO = "ATRASADO"
    DEVOLVIDO = "DEVOLVIDO"


class CamelModel(BaseModel):
    """
    Base dos DTOs: JSON em camelCase, aceitando também snake_case na entrada.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def agora() -> datetime:
    """Data/hora local atual, truncada em segundos."""
    return datetime.now().replace(microsecond=0)
