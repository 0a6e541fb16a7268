"""
Parâmetros de rota compartilhados.
"""

from typing import Annotated

from fastapi import Path

from app.models.common import INTEIRO_MAXIMO

# ids fora do intervalo de um INTEGER do SQLite são rejeitados com 400
IdPath = Annotated[int, Path(ge=1, le=INTEIRO_MAXIMO)]
