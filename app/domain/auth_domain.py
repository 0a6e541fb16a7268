"""
Serviço de Autenticação (hash de senha + JWT com PyJWT).

- Depende do UsuarioDTO para persistência (SQLite).
- Fornece funções para:
  - hash e verificação de senha
  - criação e decodificação de JWT
  - registro e autenticação de usuário
  - criação do administrador inicial
"""

from __future__ import annotations
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

import jwt
from jwt import PyJWTError
from fastapi import HTTPException, status
from passlib.context import CryptContext

from app.config.settings import settings
from app.db.dto.usuario_dto import UsuarioDTO
from app.db.sqlite import lock
from app.models.common import Perfil, agora

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Retorna datetime atual em UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


class AuthDomain:
    """
    Serviço de autenticação.

    Métodos principais:
    - 'hash_password(password: str) -> str'
    - 'verify_password(plain_password: str, hashed_password: str) -> bool'
    - 'create_access_token(data: dict, expires_delta: timedelta) -> str'
    - 'decode_token(token: str) -> dict'
    - 'authenticate_user(usuario: str, senha: str) -> Optional[dict]'
    - 'register_user(usuario, nome, email, senha) -> dict'
    - 'login(usuario: str, senha: str) -> tuple[str, dict]'
    """

    def __init__(self, repo: Optional[UsuarioDTO] = None) -> None:
        self.repo = repo or UsuarioDTO()
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.BCRYPT_ROUNDS,
        )

    def hash_password(self, password: str) -> str:
        """
        Gera hash seguro para a senha.

        - 'password': Senha em texto plano
        - return: Hash (bcrypt)
        """
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verifica senha em texto plano contra o hash armazenado.

        - 'plain_password': Senha em texto
        - 'hashed_password': Hash armazenado
        - return: True se confere; False caso contrário
        """
        return self.pwd_context.verify(plain_password, hashed_password)

    def create_access_token(self, data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Cria um token JWT assinado (HS256 por padrão).

        - 'data': Claims (ex.: {"sub": "<id>", "perfil": "USER"})
        - 'expires_delta': Tempo até expiração; padrão ACCESS_TOKEN_EXPIRE_MINUTES
        - return: Token JWT
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode = data.copy()
        now = _utcnow()
        to_encode.update({"iat": now, "exp": now + expires_delta})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Decodifica e valida um JWT.

        - 'token': JWT recebido no Authorization Bearer
        - return: Claims decodificadas
        - raise: HTTPException 401 se inválido/expirado
        """
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except PyJWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token inválido ou expirado",
                headers={"WWW-Authenticate": "Bearer"},
            )

    def authenticate_user(self, usuario: str, senha: str) -> Optional[Dict[str, Any]]:
        """
        Autentica um usuário verificando a senha.

        - return: Dict do usuário se a senha confere; None caso contrário
        """
        user = self.repo.get_by_username(usuario)
        if user and self.verify_password(senha, user["senha"]):
            return user
        return None

    def login(self, usuario: str, senha: str) -> tuple[str, Dict[str, Any]]:
        """
        Autentica e emite o token de acesso.

        - return: (token, usuário)
        - raise: HTTP 401 credenciais inválidas; HTTP 403 usuário inativo
        """
        user = self.authenticate_user(usuario, senha)
        if not user:
            logger.warning("Falha de login para '%s'", usuario)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Usuário ou senha inválidos",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not user["ativo"]:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Usuário inativo")

        token = self.create_access_token({"sub": str(user["id"]), "perfil": user["perfil"]})
        logger.info("Login de '%s' (%s)", user["usuario"], user["perfil"])
        return token, user

    def ensure_unique(self, usuario: Optional[str], email: Optional[str], ignore_id: Optional[int] = None) -> None:
        """
        Garante que nome de usuário e e-mail não pertencem a outro usuário.

        - raise: HTTP 400 se já existirem
        """
        if usuario is not None:
            found = self.repo.get_by_username(usuario)
            if found and found["id"] != ignore_id:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Usuário já existe")
        if email is not None:
            found = self.repo.get_by_email(email)
            if found and found["id"] != ignore_id:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email já cadastrado")

    def register_user(
        self,
        usuario: str,
        nome: str,
        email: str,
        senha: str,
        perfil: Perfil = Perfil.USER,
    ) -> Dict[str, Any]:
        """
        Registra um novo usuário ativo (verifica duplicidade e salva hash).

        - return: Dict do usuário criado
        - raise: HTTP 400 se usuário ou e-mail já existirem
        """
        hashed = self.hash_password(senha)
        with lock:
            self.ensure_unique(usuario, email)
            user = self.repo.create_user(usuario, nome, email, hashed, perfil.value, agora().isoformat())
        logger.info("Usuário '%s' registrado com perfil %s", usuario, perfil.value)
        return user

    def ensure_admin(self) -> Optional[Dict[str, Any]]:
        """
        Cria o administrador configurado em ADMIN_USUARIO/ADMIN_SENHA,
        caso a senha esteja definida e o usuário ainda não exista.
        """
        if not settings.ADMIN_SENHA:
            return None
        if self.repo.get_by_username(settings.ADMIN_USUARIO):
            return None
        return self.register_user(
            settings.ADMIN_USUARIO,
            "Administrador",
            settings.ADMIN_EMAIL,
            settings.ADMIN_SENHA,
            perfil=Perfil.ADMIN,
        )


auth_domain = AuthDomain()
