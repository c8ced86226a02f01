"""PostgreSQL persistence for chains.

Stores named chains as their textlet table and flat edge list:
  - smc_chains:   one row per stored chain
  - smc_textlets: (chain, textlet id, text) for ids 2..
  - smc_edges:    (chain, position, src, dst, punct, hits)

Storing a chain under an existing name replaces it. Loading rebuilds the
in-memory chain with the same ids, edge order and hit counts.
"""

import logging

import psycopg

from ..config import DB_CONFIG
from ..engine.chain import MarkovChain, SNAPSHOT_VERSION

logger = logging.getLogger(__name__)


def connect(**overrides):
    """Get a connection to the chain database."""
    return psycopg.connect(**{**DB_CONFIG, **overrides})


def init_schema(conn):
    """Create the chain tables if they don't exist."""
    with conn.cursor() as cur:
        cur.execute("""
            CREATE TABLE IF NOT EXISTS smc_chains (
                id          SERIAL PRIMARY KEY,
                name        TEXT NOT NULL UNIQUE,
                textlets    INTEGER NOT NULL,
                edges       INTEGER NOT NULL,
                created_at  TIMESTAMPTZ DEFAULT now()
            );

            CREATE TABLE IF NOT EXISTS smc_textlets (
                chain_id    INTEGER NOT NULL REFERENCES smc_chains(id) ON DELETE CASCADE,
                textlet_id  INTEGER NOT NULL,
                text        TEXT NOT NULL,
                PRIMARY KEY (chain_id, textlet_id)
            );

            CREATE TABLE IF NOT EXISTS smc_edges (
                chain_id    INTEGER NOT NULL REFERENCES smc_chains(id) ON DELETE CASCADE,
                position    INTEGER NOT NULL,
                src         INTEGER NOT NULL,
                dst         INTEGER NOT NULL,
                punct       INTEGER NOT NULL,
                hits        INTEGER NOT NULL,
                PRIMARY KEY (chain_id, position)
            );

            CREATE INDEX IF NOT EXISTS idx_smc_edges_src
                ON smc_edges(chain_id, src);
        """)
    conn.commit()


def store_chain(conn, name, chain):
    """Store a chain under name, replacing any chain of that name.

    Returns the database id of the stored chain.
    """
    data = chain.to_dict()

    with conn.cursor() as cur:
        cur.execute("DELETE FROM smc_chains WHERE name = %s", (name,))
        cur.execute("""
            INSERT INTO smc_chains (name, textlets, edges)
            VALUES (%s, %s, %s)
            RETURNING id
        """, (name, chain.num_textlets(), chain.num_edges()))
        chain_id = cur.fetchone()[0]

        cur.executemany("""
            INSERT INTO smc_textlets (chain_id, textlet_id, text)
            VALUES (%s, %s, %s)
        """, [(chain_id, i, text) for i, text in enumerate(data["textlets"], start=2)])

        cur.executemany("""
            INSERT INTO smc_edges (chain_id, position, src, dst, punct, hits)
            VALUES (%s, %s, %s, %s, %s, %s)
        """, [(chain_id, pos, *edge) for pos, edge in enumerate(data["edges"])])

    conn.commit()
    logger.info("Stored chain %r (%d textlets, %d edges)",
                name, chain.num_textlets(), chain.num_edges())
    return chain_id


def load_chain(conn, name, rng=None):
    """Rebuild the chain stored under name.

    Raises KeyError if no chain of that name exists.
    """
    with conn.cursor() as cur:
        cur.execute("SELECT id FROM smc_chains WHERE name = %s", (name,))
        row = cur.fetchone()
        if row is None:
            raise KeyError(f"No stored chain named {name!r}")
        chain_id = row[0]

        cur.execute("""
            SELECT textlet_id, text FROM smc_textlets
            WHERE chain_id = %s ORDER BY textlet_id
        """, (chain_id,))
        textlets = [text for _, text in cur.fetchall()]

        cur.execute("""
            SELECT src, dst, punct, hits FROM smc_edges
            WHERE chain_id = %s ORDER BY position
        """, (chain_id,))
        edges = [list(r) for r in cur.fetchall()]

    chain = MarkovChain.from_dict(
        {"version": SNAPSHOT_VERSION, "textlets": textlets, "edges": edges},
        rng=rng,
    )
    logger.info("Loaded chain %r (%d textlets, %d edges)",
                name, chain.num_textlets(), chain.num_edges())
    return chain


def list_chains(conn):
    """List stored chains as (name, textlets, edges) tuples."""
    with conn.cursor() as cur:
        cur.execute("SELECT name, textlets, edges FROM smc_chains ORDER BY name")
        return [tuple(r) for r in cur.fetchall()]
