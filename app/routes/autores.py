from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from app.config.security import get_current_user, require_admin
from app.domain.autor_domain import autor_domain
from app.domain.livro_domain import livro_domain
from app.models.autor import AutorRequest, AutorResponse, AutorUpdateRequest
from app.models.livro import LivroResponse
from app.routes.params import IdPath

router = APIRouter(prefix="/api/autores", tags=["Autores"])


@router.get("", response_model=List[AutorResponse])
def listar_autores(nome: Optional[str] = None, _user: dict = Depends(get_current_user)):
    return [AutorResponse.from_row(a) for a in autor_domain.listar(nome=nome)]


@router.get("/{autor_id}", response_model=AutorResponse)
def obter_autor(autor_id: IdPath, _user: dict = Depends(get_current_user)):
    return AutorResponse.from_row(autor_domain.obter(autor_id))


@router.get("/{autor_id}/livros", response_model=List[LivroResponse])
def livros_do_autor(autor_id: IdPath, _user: dict = Depends(get_current_user)):
    autor_domain.obter(autor_id)
    return [LivroResponse.from_row(livro) for livro in livro_domain.buscar(autor_id=autor_id)]


@router.post("", response_model=AutorResponse, status_code=status.HTTP_201_CREATED)
def criar_autor(req: AutorRequest, _admin: dict = Depends(require_admin)):
    return AutorResponse.from_row(autor_domain.criar(req))


@router.put("/{autor_id}", response_model=AutorResponse)
def atualizar_autor(autor_id: IdPath, req: AutorUpdateRequest, _admin: dict = Depends(require_admin)):
    return AutorResponse.from_row(autor_domain.atualizar(autor_id, req))


@router.delete("/{autor_id}", status_code=status.HTTP_204_NO_CONTENT)
def excluir_autor(autor_id: IdPath, _admin: dict = Depends(require_admin)):
    autor_domain.excluir(autor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
