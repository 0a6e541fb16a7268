"""
Gerenciamento de usuários: consulta, atualização parcial,
ativação/desativação e exclusão.

As regras de permissão recebem o usuário autenticado ('atual') para
distinguir ADMIN de um USER editando o próprio cadastro.
"""

from __future__ import annotations
import logging
from typing import Optional, Dict, Any, List

from fastapi import HTTPException, status

from app.db.dto.emprestimo_dto import EmprestimoDTO
from app.db.dto.usuario_dto import UsuarioDTO
from app.db.sqlite import lock
from app.domain.auth_domain import AuthDomain, auth_domain
from app.models.common import Perfil
from app.models.usuario import UsuarioUpdateRequest

logger = logging.getLogger(__name__)


def is_admin(user: Dict[str, Any]) -> bool:
    return user["perfil"] == Perfil.ADMIN.value


class UsuarioDomain:

    def __init__(
        self,
        repo: Optional[UsuarioDTO] = None,
        emprestimos: Optional[EmprestimoDTO] = None,
        auth: Optional[AuthDomain] = None,
    ) -> None:
        self.repo = repo or UsuarioDTO()
        self.emprestimos = emprestimos or EmprestimoDTO()
        self.auth = auth or auth_domain

    def listar(self, ativo: Optional[bool] = None) -> List[Dict[str, Any]]:
        return self.repo.list_all(ativo=ativo)

    def obter(self, usuario_id: int) -> Dict[str, Any]:
        """
        - raise: HTTP 404 se o usuário não existir
        """
        user = self.repo.get_by_id(usuario_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuário não encontrado")
        return user

    def obter_para(self, usuario_id: int, atual: Dict[str, Any]) -> Dict[str, Any]:
        """Usuário visível para 'atual' (ele mesmo ou qualquer um, se ADMIN)."""
        if not is_admin(atual) and atual["id"] != usuario_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acesso negado")
        return self.obter(usuario_id)

    def atualizar(self, usuario_id: int, req: UsuarioUpdateRequest, atual: Dict[str, Any]) -> Dict[str, Any]:
        """
        Aplica somente os campos enviados.

        - USER só altera o próprio cadastro e não muda 'perfil' nem 'ativo'
        - ADMIN não remove o próprio perfil ADMIN nem se desativa
        - 'senha' é gravada como hash
        - raise: HTTP 400/403/404
        """
        alvo = self.obter_para(usuario_id, atual)
        dados = req.model_dump(exclude_unset=True, exclude_none=True)

        if not is_admin(atual) and ("perfil" in dados or "ativo" in dados):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Apenas administradores podem alterar perfil ou status",
            )
        if atual["id"] == alvo["id"]:
            if dados.get("perfil") == Perfil.USER and is_admin(alvo):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Não é possível remover o próprio perfil de administrador",
                )
            if dados.get("ativo") is False:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Não é possível desativar o próprio usuário",
                )

        if "perfil" in dados:
            dados["perfil"] = dados["perfil"].value
        if "ativo" in dados:
            dados["ativo"] = int(dados["ativo"])
        if "senha" in dados:
            dados["senha"] = self.auth.hash_password(dados["senha"])

        with lock:
            self.auth.ensure_unique(dados.get("usuario"), dados.get("email"), ignore_id=alvo["id"])
            atualizado = self.repo.update_user(alvo["id"], dados)
        logger.info("Usuário %s atualizado por '%s': %s", alvo["id"], atual["usuario"], sorted(dados))
        return atualizado

    def definir_ativo(self, usuario_id: int, ativo: bool, atual: Dict[str, Any]) -> Dict[str, Any]:
        alvo = self.obter(usuario_id)
        if not ativo and alvo["id"] == atual["id"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Não é possível desativar o próprio usuário",
            )
        atualizado = self.repo.update_user(alvo["id"], {"ativo": int(ativo)})
        logger.info("Usuário %s %s por '%s'", alvo["id"], "ativado" if ativo else "desativado", atual["usuario"])
        return atualizado

    def excluir(self, usuario_id: int, atual: Dict[str, Any]) -> None:
        """
        - raise: HTTP 400 se for o próprio usuário ou houver empréstimos em aberto
        """
        alvo = self.obter(usuario_id)
        if alvo["id"] == atual["id"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Não é possível excluir o próprio usuário",
            )
        with lock:
            if self.emprestimos.count_abertos(usuario_id=alvo["id"]):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Usuário possui empréstimos em aberto",
                )
            self.repo.delete_user(alvo["id"])
        logger.info("Usuário %s excluído por '%s'", alvo["id"], atual["usuario"])


usuario_domain = UsuarioDomain()
