"""
Repositório de Empréstimos (SQLite).

Empréstimo e devolução alteram 'emprestimos' e 'livros' na mesma
transação. Datas são gravadas como ISO-8601 sem frações de segundo,
o que permite compará-las como texto.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List

from app.db.sqlite import get_connection, lock, transaction

_SELECT = """
SELECT e.*, u.usuario AS usuario, l.titulo AS livro_titulo
FROM emprestimos e
JOIN usuarios u ON u.id = e.usuario_id
JOIN livros l ON l.id = e.livro_id
"""


class EmprestimoDTO:

    def get_by_id(self, emprestimo_id: int) -> Optional[Dict[str, Any]]:
        with lock:
            row = get_connection().execute(_SELECT + " WHERE e.id = ?", (emprestimo_id,)).fetchone()
        return dict(row) if row else None

    def list(
        self,
        usuario_id: Optional[int] = None,
        livro_id: Optional[int] = None,
        abertos: Optional[bool] = None,
    ) -> List[Dict[str, Any]]:
        """
        Lista empréstimos do mais recente para o mais antigo.

        - abertos: True = sem devolução; False = devolvidos
        """
        where: List[str] = []
        params: List[Any] = []
        if usuario_id is not None:
            where.append("e.usuario_id = ?")
            params.append(usuario_id)
        if livro_id is not None:
            where.append("e.livro_id = ?")
            params.append(livro_id)
        if abertos is not None:
            where.append("e.data_devolucao IS NULL" if abertos else "e.data_devolucao IS NOT NULL")

        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        with lock:
            rows = get_connection().execute(
                sql + " ORDER BY e.data_emprestimo DESC, e.id DESC", params
            ).fetchall()
        return [dict(r) for r in rows]

    def list_atrasados(self, agora_iso: str, usuario_id: Optional[int] = None) -> List[Dict[str, Any]]:
        sql = _SELECT + " WHERE e.data_devolucao IS NULL AND e.data_prevista_devolucao < ?"
        params: List[Any] = [agora_iso]
        if usuario_id is not None:
            sql += " AND e.usuario_id = ?"
            params.append(usuario_id)
        with lock:
            rows = get_connection().execute(sql + " ORDER BY e.data_prevista_devolucao", params).fetchall()
        return [dict(r) for r in rows]

    def count_abertos(self, usuario_id: Optional[int] = None, livro_id: Optional[int] = None) -> int:
        sql = "SELECT COUNT(*) FROM emprestimos WHERE data_devolucao IS NULL"
        params: List[Any] = []
        if usuario_id is not None:
            sql += " AND usuario_id = ?"
            params.append(usuario_id)
        if livro_id is not None:
            sql += " AND livro_id = ?"
            params.append(livro_id)
        with lock:
            return get_connection().execute(sql, params).fetchone()[0]

    def create(
        self,
        usuario_id: int,
        livro_id: int,
        data_emprestimo_iso: str,
        data_prevista_iso: str,
    ) -> Optional[Dict[str, Any]]:
        """
        Retira um exemplar e registra o empréstimo.

        - return: dict do empréstimo criado, ou None se não havia exemplar disponível
        """
        with transaction() as cur:
            cur.execute(
                "UPDATE livros SET quantidade_disponivel = quantidade_disponivel - 1 "
                "WHERE id = ? AND quantidade_disponivel > 0",
                (livro_id,),
            )
            if cur.rowcount == 0:
                return None
            cur.execute(
                "INSERT INTO emprestimos (usuario_id, livro_id, data_emprestimo, data_prevista_devolucao) "
                "VALUES (?, ?, ?, ?)",
                (usuario_id, livro_id, data_emprestimo_iso, data_prevista_iso),
            )
            new_id = cur.lastrowid
        return self.get_by_id(new_id)

    def registrar_devolucao(self, emprestimo_id: int, data_devolucao_iso: str) -> bool:
        """
        Marca a devolução e devolve o exemplar ao acervo.

        - return: False se o empréstimo já estava devolvido (ou não existe)
        """
        with transaction() as cur:
            cur.execute(
                "UPDATE emprestimos SET data_devolucao = ? WHERE id = ? AND data_devolucao IS NULL",
                (data_devolucao_iso, emprestimo_id),
            )
            if cur.rowcount == 0:
                return False
            cur.execute(
                "UPDATE livros SET quantidade_disponivel = quantidade_disponivel + 1 "
                "WHERE id = (SELECT livro_id FROM emprestimos WHERE id = ?)",
                (emprestimo_id,),
            )
        return True
