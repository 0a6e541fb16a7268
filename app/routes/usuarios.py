"""
Rotas de gerenciamento de usuários.

Protegidas por Bearer Token; listagem, ativação/desativação e exclusão
exigem perfil ADMIN. Consulta e atualização também são permitidas ao
próprio usuário.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from app.config.security import get_current_user, require_admin
from app.domain.usuario_domain import usuario_domain
from app.models.usuario import UsuarioResponse, UsuarioUpdateRequest
from app.routes.params import IdPath

router = APIRouter(prefix="/api/usuarios", tags=["Usuários"])


@router.get("", response_model=List[UsuarioResponse])
def listar_usuarios(ativo: Optional[bool] = None, _admin: dict = Depends(require_admin)):
    return [UsuarioResponse.from_row(u) for u in usuario_domain.listar(ativo=ativo)]


@router.get("/{usuario_id}", response_model=UsuarioResponse)
def obter_usuario(usuario_id: IdPath, user: dict = Depends(get_current_user)):
    return UsuarioResponse.from_row(usuario_domain.obter_para(usuario_id, user))


@router.put("/{usuario_id}", response_model=UsuarioResponse)
def atualizar_usuario(usuario_id: IdPath, req: UsuarioUpdateRequest, user: dict = Depends(get_current_user)):
    """
    Atualiza somente os campos enviados.
    """
    return UsuarioResponse.from_row(usuario_domain.atualizar(usuario_id, req, user))


@router.patch("/{usuario_id}/ativar", response_model=UsuarioResponse)
def ativar_usuario(usuario_id: IdPath, admin: dict = Depends(require_admin)):
    return UsuarioResponse.from_row(usuario_domain.definir_ativo(usuario_id, True, admin))


@router.patch("/{usuario_id}/desativar", response_model=UsuarioResponse)
def desativar_usuario(usuario_id: IdPath, admin: dict = Depends(require_admin)):
    return UsuarioResponse.from_row(usuario_domain.definir_ativo(usuario_id, False, admin))


@router.delete("/{usuario_id}", status_code=status.HTTP_204_NO_CONTENT)
def excluir_usuario(usuario_id: IdPath, admin: dict = Depends(require_admin)):
    usuario_domain.excluir(usuario_id, admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
