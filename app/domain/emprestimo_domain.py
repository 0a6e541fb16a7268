"""
Domínio de empréstimos: retirada, devolução, histórico e atrasos.

O status não é gravado; é derivado das datas:
- com data de devolução      -> DEVOLVIDO
- aberto e vencido (agora > prevista) -> ATRASADO
- aberto dentro do prazo     -> ATIVO
"""

from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, List

from fastapi import HTTPException, status

from app.config.settings import settings
from app.db.dto.emprestimo_dto import EmprestimoDTO
from app.db.dto.livro_dto import LivroDTO
from app.db.dto.usuario_dto import UsuarioDTO
from app.db.sqlite import lock
from app.domain.usuario_domain import is_admin
from app.models.common import StatusEmprestimo, agora
from app.models.emprestimo import EmprestimoRequest, EmprestimoResponse

logger = logging.getLogger(__name__)


def calcular_status(emprestimo: Dict[str, Any], now: Optional[datetime] = None) -> tuple[StatusEmprestimo, int]:
    """
    - return: (status, dias de atraso inteiros)
    """
    if emprestimo["data_devolucao"]:
        return StatusEmprestimo.DEVOLVIDO, 0
    now = now or agora()
    prevista = datetime.fromisoformat(emprestimo["data_prevista_devolucao"])
    if now > prevista:
        return StatusEmprestimo.ATRASADO, (now - prevista).days
    return StatusEmprestimo.ATIVO, 0


def to_response(emprestimo: Dict[str, Any], now: Optional[datetime] = None) -> EmprestimoResponse:
    situacao, dias_atraso = calcular_status(emprestimo, now)
    return EmprestimoResponse(
        id=emprestimo["id"],
        usuario_id=emprestimo["usuario_id"],
        usuario=emprestimo["usuario"],
        livro_id=emprestimo["livro_id"],
        livro_titulo=emprestimo["livro_titulo"],
        data_emprestimo=emprestimo["data_emprestimo"],
        data_prevista_devolucao=emprestimo["data_prevista_devolucao"],
        data_devolucao=emprestimo["data_devolucao"],
        status=situacao,
        dias_atraso=dias_atraso,
    )


class EmprestimoDomain:

    def __init__(
        self,
        repo: Optional[EmprestimoDTO] = None,
        livros: Optional[LivroDTO] = None,
        usuarios: Optional[UsuarioDTO] = None,
    ) -> None:
        self.repo = repo or EmprestimoDTO()
        self.livros = livros or LivroDTO()
        self.usuarios = usuarios or UsuarioDTO()

    def obter(self, emprestimo_id: int) -> Dict[str, Any]:
        emprestimo = self.repo.get_by_id(emprestimo_id)
        if not emprestimo:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empréstimo não encontrado")
        return emprestimo

    def obter_para(self, emprestimo_id: int, atual: Dict[str, Any]) -> Dict[str, Any]:
        emprestimo = self.obter(emprestimo_id)
        if not is_admin(atual) and emprestimo["usuario_id"] != atual["id"]:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acesso negado")
        return emprestimo

    def emprestar(self, req: EmprestimoRequest, atual: Dict[str, Any]) -> Dict[str, Any]:
        """
        Empresta um exemplar do livro ao tomador.

        - Tomador padrão é o usuário autenticado; outro tomador exige ADMIN (403)
        - raise: HTTP 404 livro/usuário inexistente; HTTP 400 se o tomador estiver
          inativo, já tiver este livro, atingiu o limite, tiver atraso pendente,
          o prazo exceder o máximo ou não houver exemplar disponível
        """
        tomador_id = req.usuario_id if req.usuario_id is not None else atual["id"]
        if tomador_id != atual["id"] and not is_admin(atual):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Apenas administradores podem registrar empréstimos para outros usuários",
            )

        tomador = self.usuarios.get_by_id(tomador_id)
        if not tomador:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuário não encontrado")
        if not tomador["ativo"]:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Usuário inativo")

        livro = self.livros.get_by_id(req.livro_id)
        if not livro:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Livro não encontrado")

        prazo = req.prazo_dias or settings.PRAZO_EMPRESTIMO_DIAS
        if prazo > settings.MAX_PRAZO_EMPRESTIMO_DIAS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Prazo máximo de empréstimo é de {settings.MAX_PRAZO_EMPRESTIMO_DIAS} dias",
            )

        # verificações e gravação sob o mesmo lock
        with lock:
            now = agora()
            if self.repo.count_abertos(usuario_id=tomador_id, livro_id=livro["id"]):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Usuário já possui um empréstimo em aberto deste livro",
                )
            if self.repo.list_atrasados(now.isoformat(), usuario_id=tomador_id):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Usuário possui empréstimos em atraso",
                )
            if self.repo.count_abertos(usuario_id=tomador_id) >= settings.MAX_EMPRESTIMOS_ATIVOS:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Limite de {settings.MAX_EMPRESTIMOS_ATIVOS} empréstimos ativos atingido",
                )

            emprestimo = self.repo.create(
                tomador_id,
                livro["id"],
                now.isoformat(),
                (now + timedelta(days=prazo)).isoformat(),
            )
            if emprestimo is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Livro indisponível para empréstimo",
                )
        logger.info(
            "Empréstimo %s: livro %s para '%s' até %s",
            emprestimo["id"], livro["id"], tomador["usuario"], emprestimo["data_prevista_devolucao"],
        )
        return emprestimo

    def devolver(self, emprestimo_id: int, atual: Dict[str, Any]) -> Dict[str, Any]:
        """
        Registra a devolução (dono do empréstimo ou ADMIN).

        - raise: HTTP 400 se já devolvido
        """
        emprestimo = self.obter_para(emprestimo_id, atual)
        if emprestimo["data_devolucao"] or not self.repo.registrar_devolucao(emprestimo_id, agora().isoformat()):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empréstimo já devolvido")
        logger.info("Empréstimo %s devolvido (registrado por '%s')", emprestimo_id, atual["usuario"])
        return self.repo.get_by_id(emprestimo_id)

    def historico(self, usuario_id: int) -> List[Dict[str, Any]]:
        return self.repo.list(usuario_id=usuario_id)

    def listar(
        self,
        usuario_id: Optional[int] = None,
        livro_id: Optional[int] = None,
        situacao: Optional[StatusEmprestimo] = None,
        now: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        abertos = None
        if situacao is StatusEmprestimo.DEVOLVIDO:
            abertos = False
        elif situacao is not None:
            abertos = True
        emprestimos = self.repo.list(usuario_id=usuario_id, livro_id=livro_id, abertos=abertos)
        if situacao in (StatusEmprestimo.ATIVO, StatusEmprestimo.ATRASADO):
            now = now or agora()
            emprestimos = [e for e in emprestimos if calcular_status(e, now)[0] is situacao]
        return emprestimos

    def atrasados(self, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        now = now or agora()
        return self.repo.list_atrasados(now.isoformat())


emprestimo_domain = EmprestimoDomain()
