"""
Rotas de empréstimos (retirada, devolução, histórico e atrasos).

Protegido por Bearer Token (HTTP Authorization).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.config.security import get_current_user, require_admin
from app.domain.emprestimo_domain import emprestimo_domain, to_response
from app.models.common import INTEIRO_MAXIMO, StatusEmprestimo
from app.models.emprestimo import EmprestimoRequest, EmprestimoResponse
from app.routes.params import IdPath

router = APIRouter(prefix="/api/emprestimos", tags=["Empréstimos"])


@router.post("", response_model=EmprestimoResponse, status_code=status.HTTP_201_CREATED)
def emprestar(req: EmprestimoRequest, user: dict = Depends(get_current_user)):
    """
    Empresta um exemplar. Sem 'usuarioId', o tomador é o usuário autenticado.
    """
    return to_response(emprestimo_domain.emprestar(req, user))


@router.get("/meus", response_model=List[EmprestimoResponse])
def meus_emprestimos(user: dict = Depends(get_current_user)):
    """
    Histórico de empréstimos do usuário autenticado (mais recentes primeiro).
    """
    return [to_response(e) for e in emprestimo_domain.historico(user["id"])]


@router.get("/atrasados", response_model=List[EmprestimoResponse])
def emprestimos_atrasados(_admin: dict = Depends(require_admin)):
    return [to_response(e) for e in emprestimo_domain.atrasados()]


@router.get("", response_model=List[EmprestimoResponse])
def listar_emprestimos(
    usuario_id: Optional[int] = Query(None, alias="usuarioId", ge=1, le=INTEIRO_MAXIMO),
    livro_id: Optional[int] = Query(None, alias="livroId", ge=1, le=INTEIRO_MAXIMO),
    situacao: Optional[StatusEmprestimo] = Query(None, alias="status"),
    _admin: dict = Depends(require_admin),
):
    emprestimos = emprestimo_domain.listar(usuario_id=usuario_id, livro_id=livro_id, situacao=situacao)
    return [to_response(e) for e in emprestimos]


@router.get("/{emprestimo_id}", response_model=EmprestimoResponse)
def obter_emprestimo(emprestimo_id: IdPath, user: dict = Depends(get_current_user)):
    return to_response(emprestimo_domain.obter_para(emprestimo_id, user))


@router.post("/{emprestimo_id}/devolucao", response_model=EmprestimoResponse)
def devolver(emprestimo_id: IdPath, user: dict = Depends(get_current_user)):
    """
    Registra a devolução (dono do empréstimo ou ADMIN).
    """
    return to_response(emprestimo_domain.devolver(emprestimo_id, user))
