from typing import Optional

from pydantic import Field

from app.models.common import INTEIRO_MAXIMO, CamelModel, DataHora, StatusEmprestimo


class EmprestimoRequest(CamelModel):
    """
    Requisição de empréstimo.

    - `livroId`: Livro a emprestar
    - `usuarioId`: Tomador; omitido = usuário autenticado (outro usuário exige ADMIN)
    - `prazoDias`: Prazo de devolução; omitido = prazo padrão configurado
    """
    livro_id: int = Field(..., ge=1, le=INTEIRO_MAXIMO, examples=[1])
    usuario_id: Optional[int] = Field(None, ge=1, le=INTEIRO_MAXIMO, examples=[2])
    prazo_dias: Optional[int] = Field(None, ge=1, examples=[14])


class EmprestimoResponse(CamelModel):
    id: int
    usuario_id: int
    usuario: str
    livro_id: int
    livro_titulo: str
    data_emprestimo: DataHora
    data_prevista_devolucao: DataHora
    data_devolucao: Optional[DataHora] = None
    status: StatusEmprestimo
    dias_atraso: int = 0
