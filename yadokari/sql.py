from sqlalchemy import MetaData, Table, Column, Integer, String
from sqlalchemy.engine import Engine

metadata = MetaData()

# ---------- Tables ----------

# Mirror of the most recently fetched snapshot; replaced wholesale every run.
listing_state = Table(
    "listing_state", metadata,
    Column("id", String, primary_key=True),
    Column("normal_rent", String, nullable=False),
    Column("row_span", Integer, nullable=False),
)


def init_db(engine: Engine) -> None:
    """Create missing tables. Existing rows are left alone."""
    metadata.create_all(engine)
