"""
Repositório de Autores (SQLite).
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List

from app.db.sqlite import get_connection, lock, transaction

_SELECT = """
SELECT a.*, (SELECT COUNT(*) FROM livros l WHERE l.autor_id = a.id) AS quantidade_livros
FROM autores a
"""

_UPDATABLE = ("nome", "nacionalidade", "data_nascimento", "biografia")


class AutorDTO:

    def get_by_id(self, autor_id: int) -> Optional[Dict[str, Any]]:
        with lock:
            row = get_connection().execute(_SELECT + " WHERE a.id = ?", (autor_id,)).fetchone()
        return dict(row) if row else None

    def list_all(self, nome: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Lista autores, opcionalmente filtrando por trecho do nome (sem diferenciar maiúsculas).
        """
        sql = _SELECT
        params: tuple = ()
        if nome:
            sql += " WHERE lower(a.nome) LIKE lower(?)"
            params = (f"%{nome}%",)
        with lock:
            rows = get_connection().execute(sql + " ORDER BY a.nome", params).fetchall()
        return [dict(r) for r in rows]

    def create(self, data: Dict[str, Any], created_at_iso: str) -> Dict[str, Any]:
        with transaction() as cur:
            cur.execute(
                "INSERT INTO autores (nome, nacionalidade, data_nascimento, biografia, data_criacao) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    data["nome"],
                    data.get("nacionalidade"),
                    data.get("data_nascimento"),
                    data.get("biografia"),
                    created_at_iso,
                ),
            )
            new_id = cur.lastrowid
        return self.get_by_id(new_id)

    def update(self, autor_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        cols = [c for c in fields if c in _UPDATABLE]
        if cols:
            assignments = ", ".join(f"{c} = ?" for c in cols)
            with transaction() as cur:
                cur.execute(
                    f"UPDATE autores SET {assignments} WHERE id = ?",
                    (*[fields[c] for c in cols], autor_id),
                )
        return self.get_by_id(autor_id)

    def delete(self, autor_id: int) -> bool:
        with transaction() as cur:
            cur.execute("DELETE FROM autores WHERE id = ?", (autor_id,))
            return cur.rowcount > 0
