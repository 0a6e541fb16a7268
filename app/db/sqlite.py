"""
Módulo de conexão SQLite da biblioteca.

Mantém uma única conexão compartilhada (check_same_thread=False) protegida
por um RLock, já que o FastAPI executa rotas síncronas em um threadpool.
Em produção prefira um banco robusto (Postgres, MySQL).
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from app.config.settings import settings

logger = logging.getLogger(__name__)

lock = threading.RLock()
_conn: Optional[sqlite3.Connection] = None

SCHEMA = """
CREATE TABLE IF NOT EXISTS usuarios (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    usuario TEXT NOT NULL UNIQUE,
    nome TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    senha TEXT NOT NULL,
    perfil TEXT NOT NULL DEFAULT 'USER' CHECK (perfil IN ('USER', 'ADMIN')),
    ativo INTEGER NOT NULL DEFAULT 1,
    data_criacao TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS autores (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    nome TEXT NOT NULL,
    nacionalidade TEXT,
    data_nascimento TEXT,
    biografia TEXT,
    data_criacao TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS livros (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    titulo TEXT NOT NULL,
    isbn TEXT NOT NULL UNIQUE,
    ano_publicacao INTEGER,
    editora TEXT,
    autor_id INTEGER NOT NULL REFERENCES autores(id),
    quantidade_total INTEGER NOT NULL CHECK (quantidade_total >= 1),
    quantidade_disponivel INTEGER NOT NULL
        CHECK (quantidade_disponivel >= 0 AND quantidade_disponivel <= quantidade_total),
    data_criacao TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS emprestimos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    usuario_id INTEGER NOT NULL REFERENCES usuarios(id) ON DELETE CASCADE,
    livro_id INTEGER NOT NULL REFERENCES livros(id) ON DELETE CASCADE,
    data_emprestimo TEXT NOT NULL,
    data_prevista_devolucao TEXT NOT NULL,
    data_devolucao TEXT
);

CREATE INDEX IF NOT EXISTS idx_livros_autor ON livros(autor_id);
CREATE INDEX IF NOT EXISTS idx_emprestimos_usuario ON emprestimos(usuario_id);
CREATE INDEX IF NOT EXISTS idx_emprestimos_livro ON emprestimos(livro_id);
"""


def connect(db_path: str | Path | None = None) -> sqlite3.Connection:
    """
    Abre (ou reabre) a conexão compartilhada.

    - 'db_path': Arquivo SQLite; usa settings.DB_PATH se omitido
    - return: Conexão ativa
    """
    global _conn
    with lock:
        if _conn is not None:
            _conn.close()
        path = db_path or settings.DB_PATH
        _conn = sqlite3.connect(path, check_same_thread=False)
        _conn.row_factory = sqlite3.Row
        _conn.execute("PRAGMA foreign_keys = ON;")
        logger.info("SQLite conectado em %s", path)
        return _conn


def get_connection() -> sqlite3.Connection:
    if _conn is None:
        return connect()
    return _conn


def close() -> None:
    global _conn
    with lock:
        if _conn is not None:
            _conn.close()
            _conn = None


@contextmanager
def transaction() -> Iterator[sqlite3.Cursor]:
    """
    Cursor dentro de uma transação: commit ao final, rollback em erro.
    """
    with lock:
        conn = get_connection()
        cur = conn.cursor()
        try:
            yield cur
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            cur.close()


def init_db() -> None:
    """
    Inicializa o schema da biblioteca no SQLite.

    Cria as tabelas 'usuarios', 'autores', 'livros' e 'emprestimos'
    e seus índices se ainda não existirem.
    """
    with lock:
        get_connection().executescript(SCHEMA)
