import logging
from typing import Dict, List, Sequence, Set

from sqlalchemy import delete, insert, select, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from yadokari.errors import PersistenceFailure
from yadokari.models import IdentityKey, Listing
from yadokari.sql import listing_state

LOG = logging.getLogger("repo")


def persisted_keys(conn: Connection) -> Set[IdentityKey]:
    """Identity keys of the snapshot stored by the previous run."""
    rows = conn.execute(
        select(listing_state.c.id, listing_state.c.normal_rent, listing_state.c.row_span)
    ).all()
    return {(r.id, r.normal_rent, r.row_span) for r in rows}


def diff(conn: Connection, current: Sequence[Listing]) -> List[Listing]:
    """
    Listings from `current` whose identity key is not persisted yet.
    Must run before commit() in the same transaction.
    """
    seen = persisted_keys(conn)
    return [li for li in current if li.identity_key not in seen]


def unique_by_id(current: Sequence[Listing]) -> List[Listing]:
    """Drop repeated ids, keeping the first occurrence (the table is keyed by id)."""
    out: Dict[str, Listing] = {}
    for li in current:
        out.setdefault(li.id, li)
    return list(out.values())


def commit(conn: Connection, current: Sequence[Listing]) -> None:
    """Replace the persisted snapshot with `current` (full overwrite, no merge)."""
    rows = [
        {"id": li.id, "normal_rent": li.normal_rent, "row_span": li.row_span}
        for li in unique_by_id(current)
    ]

    conn.execute(delete(listing_state))
    if rows:
        conn.execute(insert(listing_state), rows)


def _lock_region(conn: Connection, region_code: str) -> None:
    # Serializes runs across processes; released when the transaction ends.
    if conn.dialect.name == "postgresql":
        conn.execute(text("SELECT pg_advisory_xact_lock(hashtext(:region))"), {"region": region_code})


def refresh(engine: Engine, region_code: str, current: Sequence[Listing]) -> List[Listing]:
    """
    Diff `current` against the stored snapshot, then store `current`.
    Both happen in one transaction; returns the fresh listings.
    """
    # diff and commit must see the same set
    current = unique_by_id(current)
    try:
        with engine.begin() as conn:
            _lock_region(conn, region_code)
            fresh = diff(conn, current)
            commit(conn, current)
    except SQLAlchemyError as e:
        raise PersistenceFailure(f"snapshot refresh failed: {e}") from e

    LOG.info("region %s: %d listings stored, %d fresh", region_code, len(current), len(fresh))
    return fresh
