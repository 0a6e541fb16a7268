"""
Repositório de Livros (SQLite).

A disponibilidade é mantida em 'quantidade_disponivel'; as alterações são
feitas em um único UPDATE para que o CHECK da tabela garanta
0 <= quantidade_disponivel <= quantidade_total.
"""

from __future__ import annotations
import sqlite3
from typing import Optional, Dict, Any, List

from fastapi import HTTPException, status

from app.db.sqlite import get_connection, lock, transaction

_SELECT = """
SELECT l.*, a.nome AS autor_nome
FROM livros l
JOIN autores a ON a.id = l.autor_id
"""

_UPDATABLE = ("titulo", "isbn", "ano_publicacao", "editora", "autor_id")


def _conflito(exc: sqlite3.IntegrityError) -> HTTPException:
    if "livros.isbn" in str(exc):
        detail = "ISBN já cadastrado"
    elif "FOREIGN KEY" in str(exc):
        detail = "Autor não encontrado"
    else:
        detail = "Quantidade total menor que o número de exemplares emprestados"
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class LivroDTO:

    def get_by_id(self, livro_id: int) -> Optional[Dict[str, Any]]:
        with lock:
            row = get_connection().execute(_SELECT + " WHERE l.id = ?", (livro_id,)).fetchone()
        return dict(row) if row else None

    def get_by_isbn(self, isbn: str) -> Optional[Dict[str, Any]]:
        with lock:
            row = get_connection().execute(_SELECT + " WHERE l.isbn = ?", (isbn,)).fetchone()
        return dict(row) if row else None

    def search(
        self,
        titulo: Optional[str] = None,
        autor: Optional[str] = None,
        isbn: Optional[str] = None,
        disponivel: Optional[bool] = None,
        autor_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Busca livros combinando os filtros informados (AND).

        - titulo / autor: trecho do título / nome do autor, sem diferenciar maiúsculas
        - isbn: ISBN normalizado (igualdade)
        - disponivel: True = ao menos um exemplar disponível
        """
        where: List[str] = []
        params: List[Any] = []
        if titulo:
            where.append("lower(l.titulo) LIKE lower(?)")
            params.append(f"%{titulo}%")
        if autor:
            where.append("lower(a.nome) LIKE lower(?)")
            params.append(f"%{autor}%")
        if isbn:
            where.append("l.isbn = ?")
            params.append(isbn)
        if disponivel is not None:
            where.append("l.quantidade_disponivel > 0" if disponivel else "l.quantidade_disponivel = 0")
        if autor_id is not None:
            where.append("l.autor_id = ?")
            params.append(autor_id)

        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        with lock:
            rows = get_connection().execute(sql + " ORDER BY l.titulo", params).fetchall()
        return [dict(r) for r in rows]

    def create(self, data: Dict[str, Any], created_at_iso: str) -> Dict[str, Any]:
        try:
            with transaction() as cur:
                cur.execute(
                    "INSERT INTO livros (titulo, isbn, ano_publicacao, editora, autor_id, "
                    "quantidade_total, quantidade_disponivel, data_criacao) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        data["titulo"],
                        data["isbn"],
                        data.get("ano_publicacao"),
                        data.get("editora"),
                        data["autor_id"],
                        data["quantidade_total"],
                        data["quantidade_total"],
                        created_at_iso,
                    ),
                )
                new_id = cur.lastrowid
        except sqlite3.IntegrityError as exc:
            raise _conflito(exc)
        return self.get_by_id(new_id)

    def update(self, livro_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Atualiza as colunas informadas. Uma nova 'quantidade_total' desloca
        'quantidade_disponivel' pela mesma diferença.
        """
        assignments = [f"{c} = ?" for c in fields if c in _UPDATABLE]
        params: List[Any] = [fields[c] for c in fields if c in _UPDATABLE]
        if "quantidade_total" in fields:
            assignments.append("quantidade_disponivel = quantidade_disponivel + (? - quantidade_total)")
            assignments.append("quantidade_total = ?")
            params.extend([fields["quantidade_total"], fields["quantidade_total"]])
        if assignments:
            try:
                with transaction() as cur:
                    cur.execute(
                        f"UPDATE livros SET {', '.join(assignments)} WHERE id = ?",
                        (*params, livro_id),
                    )
            except sqlite3.IntegrityError as exc:
                raise _conflito(exc)
        return self.get_by_id(livro_id)

    def delete(self, livro_id: int) -> bool:
        with transaction() as cur:
            cur.execute("DELETE FROM livros WHERE id = ?", (livro_id,))
            return cur.rowcount > 0
