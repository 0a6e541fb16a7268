"""
Domínio de livros: cadastro, busca e controle de disponibilidade.

Exemplares emprestados = quantidade_total - quantidade_disponivel.
"""

from __future__ import annotations
import logging
from typing import Optional, Dict, Any, List

from fastapi import HTTPException, status

from app.db.dto.autor_dto import AutorDTO
from app.db.dto.emprestimo_dto import EmprestimoDTO
from app.db.dto.livro_dto import LivroDTO
from app.db.sqlite import lock
from app.models.common import agora
from app.models.livro import LivroRequest, LivroUpdateRequest, normalizar_isbn

logger = logging.getLogger(__name__)


def exemplares_emprestados(livro: Dict[str, Any]) -> int:
    return livro["quantidade_total"] - livro["quantidade_disponivel"]


class LivroDomain:

    def __init__(
        self,
        repo: Optional[LivroDTO] = None,
        autores: Optional[AutorDTO] = None,
        emprestimos: Optional[EmprestimoDTO] = None,
    ) -> None:
        self.repo = repo or LivroDTO()
        self.autores = autores or AutorDTO()
        self.emprestimos = emprestimos or EmprestimoDTO()

    def buscar(
        self,
        titulo: Optional[str] = None,
        autor: Optional[str] = None,
        isbn: Optional[str] = None,
        disponivel: Optional[bool] = None,
        autor_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        if isbn:
            isbn = normalizar_isbn(isbn)
        return self.repo.search(titulo=titulo, autor=autor, isbn=isbn, disponivel=disponivel, autor_id=autor_id)

    def obter(self, livro_id: int) -> Dict[str, Any]:
        livro = self.repo.get_by_id(livro_id)
        if not livro:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Livro não encontrado")
        return livro

    def obter_por_isbn(self, isbn: str) -> Dict[str, Any]:
        livro = self.repo.get_by_isbn(normalizar_isbn(isbn))
        if not livro:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Livro não encontrado")
        return livro

    def _check_autor(self, autor_id: int) -> None:
        if not self.autores.get_by_id(autor_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Autor não encontrado")

    def _check_isbn(self, isbn: str, ignore_id: Optional[int] = None) -> None:
        found = self.repo.get_by_isbn(isbn)
        if found and found["id"] != ignore_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="ISBN já cadastrado")

    def criar(self, req: LivroRequest) -> Dict[str, Any]:
        """
        Cadastra um livro com todos os exemplares disponíveis.

        - raise: HTTP 400 se o autor não existir ou o ISBN já estiver cadastrado
        """
        with lock:
            self._check_autor(req.autor_id)
            self._check_isbn(req.isbn)
            livro = self.repo.create(req.model_dump(), agora().isoformat())
        logger.info("Livro %s criado: '%s' (%s exemplares)", livro["id"], livro["titulo"], livro["quantidade_total"])
        return livro

    def atualizar(self, livro_id: int, req: LivroUpdateRequest) -> Dict[str, Any]:
        """
        Atualização parcial. Reduzir 'quantidade_total' abaixo do número de
        exemplares emprestados é rejeitado com HTTP 400.
        """
        dados = req.model_dump(exclude_unset=True, exclude_none=True)
        with lock:
            livro = self.obter(livro_id)
            if "autor_id" in dados:
                self._check_autor(dados["autor_id"])
            if "isbn" in dados:
                self._check_isbn(dados["isbn"], ignore_id=livro_id)
            if "quantidade_total" in dados and dados["quantidade_total"] < exemplares_emprestados(livro):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Quantidade total menor que o número de exemplares emprestados",
                )
            return self.repo.update(livro_id, dados)

    def excluir(self, livro_id: int) -> None:
        self.obter(livro_id)
        with lock:
            if self.emprestimos.count_abertos(livro_id=livro_id):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Livro possui exemplares emprestados",
                )
            self.repo.delete(livro_id)
        logger.info("Livro %s excluído", livro_id)


livro_domain = LivroDomain()
