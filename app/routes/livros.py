"""
Rotas de livros.

Consultas exigem apenas autenticação; cadastro, edição e exclusão exigem ADMIN.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from app.config.security import get_current_user, require_admin
from app.domain.livro_domain import livro_domain
from app.models.livro import LivroRequest, LivroResponse, LivroUpdateRequest
from app.routes.params import IdPath

router = APIRouter(prefix="/api/livros", tags=["Livros"])


@router.get("", response_model=List[LivroResponse])
def buscar_livros(
    titulo: Optional[str] = None,
    autor: Optional[str] = None,
    isbn: Optional[str] = None,
    disponivel: Optional[bool] = None,
    _user: dict = Depends(get_current_user),
):
    """
    Lista livros, filtrando por trecho do título, nome do autor, ISBN e disponibilidade.
    """
    livros = livro_domain.buscar(titulo=titulo, autor=autor, isbn=isbn, disponivel=disponivel)
    return [LivroResponse.from_row(livro) for livro in livros]


@router.get("/isbn/{isbn}", response_model=LivroResponse)
def obter_por_isbn(isbn: str, _user: dict = Depends(get_current_user)):
    return LivroResponse.from_row(livro_domain.obter_por_isbn(isbn))


@router.get("/{livro_id}", response_model=LivroResponse)
def obter_livro(livro_id: IdPath, _user: dict = Depends(get_current_user)):
    return LivroResponse.from_row(livro_domain.obter(livro_id))


@router.post("", response_model=LivroResponse, status_code=status.HTTP_201_CREATED)
def criar_livro(req: LivroRequest, _admin: dict = Depends(require_admin)):
    return LivroResponse.from_row(livro_domain.criar(req))


@router.put("/{livro_id}", response_model=LivroResponse)
def atualizar_livro(livro_id: IdPath, req: LivroUpdateRequest, _admin: dict = Depends(require_admin)):
    return LivroResponse.from_row(livro_domain.atualizar(livro_id, req))


@router.delete("/{livro_id}", status_code=status.HTTP_204_NO_CONTENT)
def excluir_livro(livro_id: IdPath, _admin: dict = Depends(require_admin)):
    livro_domain.excluir(livro_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
