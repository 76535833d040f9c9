# vademecum/legal/db_writer.py
"""
Leitura de artigos e gravacao do historico de alteracoes no Postgres.

Semantica de substituicao: cada execucao apaga TODAS as anotacoes do
documento e insere o lote novo (nunca diff incremental). Delete + inserts
na mesma transacao; qualquer falha faz rollback completo.
"""
from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from psycopg2 import sql

from vademecum import config
from vademecum.db.connection import get_conn, release_conn
from vademecum.legal.errors import StorageError
from vademecum.legal.models import AmendmentAnnotation

logger = logging.getLogger(__name__)

ROW_COLUMNS = (
    "tabela_lei",
    "numero_artigo",
    "tipo_alteracao",
    "lei_alteradora",
    "data_alteracao",
    "ano_alteracao",
    "texto_completo",
    "elemento_tipo",
    "elemento_numero",
    "elemento_texto",
    "url_lei_alteradora",
)

# Tabela do documento: colunas com nome em portugues e espacos
SELECT_ARTICLES = sql.SQL(
    'SELECT "Número do Artigo", "Artigo" FROM {table} '
    'WHERE "Artigo" IS NOT NULL ORDER BY id'
)

DELETE_AMENDMENTS = sql.SQL("DELETE FROM {table} WHERE tabela_lei = %s")

INSERT_AMENDMENT = sql.SQL("INSERT INTO {table} ({cols}) VALUES ({vals})")


def _amendments_table() -> sql.Identifier:
    return sql.Identifier(config.AMENDMENTS_TABLE)


def _batches(rows: Sequence, size: int):
    for i in range(0, len(rows), size):
        yield rows[i:i + size]


def fetch_articles(table_name: str) -> List[Tuple[str, str]]:
    """
    Artigos de uma tabela de lei.

    Returns:
        lista de (numero do artigo, texto) para linhas com "Artigo" preenchido
    """
    conn = get_conn()
    try:
        with conn.cursor() as cur:
            cur.execute(SELECT_ARTICLES.format(table=sql.Identifier(table_name)))
            rows = cur.fetchall()
        conn.commit()
    except Exception as e:
        conn.rollback()
        logger.exception("Erro ao buscar artigos de %s", table_name)
        raise StorageError(f"Erro ao buscar artigos: {e}") from e
    finally:
        release_conn(conn)

    logger.info("fetch_articles: %s: %d artigos", table_name, len(rows))
    return [(str(r[0]) if r[0] is not None else "", r[1]) for r in rows]


def delete_amendments(table_name: str) -> int:
    """Apaga o historico de um documento. Returns: linhas apagadas."""
    conn = get_conn()
    try:
        with conn.cursor() as cur:
            cur.execute(DELETE_AMENDMENTS.format(table=_amendments_table()), (table_name,))
            deleted = cur.rowcount
        conn.commit()
    except Exception as e:
        conn.rollback()
        logger.exception("Erro ao deletar historico de %s", table_name)
        raise StorageError(f"Erro ao deletar: {e}") from e
    finally:
        release_conn(conn)

    logger.info("delete_amendments: %s: %d linhas removidas", table_name, deleted)
    return deleted


def replace_amendments(
    table_name: str,
    annotations: Sequence[AmendmentAnnotation],
    batch_size: int = None,
) -> dict:
    """
    Substitui o historico de um documento (atomico).

    Args:
        table_name: documento/tabela
        annotations: anotacoes extraidas
        batch_size: linhas por INSERT (limitado a 100)

    Returns:
        {"deleted": N, "inserted": N, "batches": N}
    """
    size = max(1, min(batch_size or config.AMENDMENTS_BATCH_SIZE, 100))
    rows = [a.to_row() for a in annotations]

    insert = INSERT_AMENDMENT.format(
        table=_amendments_table(),
        cols=sql.SQL(", ").join(sql.Identifier(c) for c in ROW_COLUMNS),
        vals=sql.SQL(", ").join(sql.Placeholder() for _ in ROW_COLUMNS),
    )

    conn = get_conn()
    try:
        with conn.cursor() as cur:
            cur.execute(DELETE_AMENDMENTS.format(table=_amendments_table()), (table_name,))
            deleted = cur.rowcount

            batches = 0
            for batch in _batches(rows, size):
                cur.executemany(insert, [tuple(r[c] for c in ROW_COLUMNS) for r in batch])
                batches += 1
        conn.commit()
    except Exception as e:
        conn.rollback()
        logger.exception("Erro ao gravar historico de %s", table_name)
        raise StorageError(f"Erro ao inserir: {e}") from e
    finally:
        release_conn(conn)

    logger.info(
        "replace_amendments: %s: %d removidas, %d inseridas em %d lotes",
        table_name, deleted, len(rows), batches,
    )
    return {"deleted": deleted, "inserted": len(rows), "batches": batches}
