from __future__ import annotations
import logging
from typing import Optional, Dict, Any, List

from fastapi import HTTPException, status

from app.db.dto.autor_dto import AutorDTO
from app.models.autor import AutorRequest, AutorUpdateRequest
from app.models.common import agora

logger = logging.getLogger(__name__)


def _to_row(data: Dict[str, Any]) -> Dict[str, Any]:
    if data.get("data_nascimento") is not None:
        data["data_nascimento"] = data["data_nascimento"].isoformat()
    return data


class AutorDomain:
    """Cadastro de autores; um autor com livros não pode ser excluído."""

    def __init__(self, repo: Optional[AutorDTO] = None) -> None:
        self.repo = repo or AutorDTO()

    def listar(self, nome: Optional[str] = None) -> List[Dict[str, Any]]:
        return self.repo.list_all(nome=nome)

    def obter(self, autor_id: int) -> Dict[str, Any]:
        autor = self.repo.get_by_id(autor_id)
        if not autor:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Autor não encontrado")
        return autor

    def criar(self, req: AutorRequest) -> Dict[str, Any]:
        autor = self.repo.create(_to_row(req.model_dump()), agora().isoformat())
        logger.info("Autor %s criado: %s", autor["id"], autor["nome"])
        return autor

    def atualizar(self, autor_id: int, req: AutorUpdateRequest) -> Dict[str, Any]:
        self.obter(autor_id)
        return self.repo.update(autor_id, _to_row(req.model_dump(exclude_unset=True, exclude_none=True)))

    def excluir(self, autor_id: int) -> None:
        autor = self.obter(autor_id)
        if autor["quantidade_livros"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Autor possui livros cadastrados",
            )
        self.repo.delete(autor_id)
        logger.info("Autor %s excluído", autor_id)


autor_domain = AutorDomain()
