"""
Repositório de Usuários (SQLite).
Responsável por isolar o acesso ao banco (CRUD básico).
"""

from __future__ import annotations
import sqlite3
from typing import Optional, Dict, Any, List

from fastapi import HTTPException, status

from app.db.sqlite import get_connection, lock, transaction

_UPDATABLE = ("usuario", "nome", "email", "senha", "perfil", "ativo")


def _conflito(exc: sqlite3.IntegrityError) -> HTTPException:
    detail = "Email já cadastrado" if "usuarios.email" in str(exc) else "Usuário já existe"
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UsuarioDTO:
    """
    Operações de acesso a dados para usuários.
    """

    def get_by_id(self, usuario_id: int) -> Optional[Dict[str, Any]]:
        with lock:
            row = get_connection().execute(
                "SELECT * FROM usuarios WHERE id = ? LIMIT 1", (usuario_id,)
            ).fetchone()
        return dict(row) if row else None

    def get_by_username(self, usuario: str) -> Optional[Dict[str, Any]]:
        """
        Busca um usuário pelo nome de usuário.

        - usuario: Nome de usuário (único)
        - return: dict com colunas do usuário ou None
        """
        with lock:
            row = get_connection().execute(
                "SELECT * FROM usuarios WHERE usuario = ? LIMIT 1", (usuario,)
            ).fetchone()
        return dict(row) if row else None

    def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        with lock:
            row = get_connection().execute(
                "SELECT * FROM usuarios WHERE lower(email) = lower(?) LIMIT 1", (email,)
            ).fetchone()
        return dict(row) if row else None

    def list_all(self, ativo: Optional[bool] = None) -> List[Dict[str, Any]]:
        sql = "SELECT * FROM usuarios"
        params: tuple = ()
        if ativo is not None:
            sql += " WHERE ativo = ?"
            params = (int(ativo),)
        with lock:
            rows = get_connection().execute(sql + " ORDER BY id", params).fetchall()
        return [dict(r) for r in rows]

    def create_user(
        self,
        usuario: str,
        nome: str,
        email: str,
        senha_hashed: str,
        perfil: str,
        created_at_iso: str,
    ) -> Dict[str, Any]:
        """
        Cria um usuário ativo.

        - senha_hashed: Senha já criptografada (bcrypt)
        - created_at_iso: Timestamp ISO-8601 (hora local, sem frações)
        - return: dict com colunas do usuário criado
        - raise: HTTP 400 se usuário ou e-mail já existirem
        """
        try:
            with transaction() as cur:
                cur.execute(
                    "INSERT INTO usuarios (usuario, nome, email, senha, perfil, ativo, data_criacao) "
                    "VALUES (?, ?, ?, ?, ?, 1, ?)",
                    (usuario, nome, email, senha_hashed, perfil, created_at_iso),
                )
                new_id = cur.lastrowid
        except sqlite3.IntegrityError as exc:
            raise _conflito(exc)
        return self.get_by_id(new_id)

    def update_user(self, usuario_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Atualiza apenas as colunas informadas em 'fields'.
        """
        cols = [c for c in fields if c in _UPDATABLE]
        if cols:
            assignments = ", ".join(f"{c} = ?" for c in cols)
            try:
                with transaction() as cur:
                    cur.execute(
                        f"UPDATE usuarios SET {assignments} WHERE id = ?",
                        (*[fields[c] for c in cols], usuario_id),
                    )
            except sqlite3.IntegrityError as exc:
                raise _conflito(exc)
        return self.get_by_id(usuario_id)

    def delete_user(self, usuario_id: int) -> bool:
        with transaction() as cur:
            cur.execute("DELETE FROM usuarios WHERE id = ?", (usuario_id,))
            return cur.rowcount > 0
