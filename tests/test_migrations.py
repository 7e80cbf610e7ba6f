from __future__ import annotations

from sqlalchemy import create_engine, inspect

from infra.db.base import Base
from infra.migrate import run_migrations


def test_migrations_create_the_mapped_schema(tmp_path):
    db_url = f"sqlite:///{(tmp_path / 'ledger.db').as_posix()}"

    run_migrations(db_url)

    engine = create_engine(db_url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        assert set(Base.metadata.tables) <= tables
        for name, table in Base.metadata.tables.items():
            migrated = {c["name"] for c in inspector.get_columns(name)}
            assert {c.name for c in table.columns} == migrated, name
    finally:
        engine.dispose()
