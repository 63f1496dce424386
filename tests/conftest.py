"""Shared fixtures."""

import tempfile
from pathlib import Path

import pytest

from lmsrmarket.storage.db import get_connection, init_schema


@pytest.fixture
def temp_db():
    tmp = tempfile.mkdtemp()
    path = Path(tmp) / "test.duckdb"
    conn = get_connection(path)
    init_schema(conn)
    yield conn
    conn.close()
    path.unlink(missing_ok=True)
    Path(tmp).rmdir()


@pytest.fixture
def config_dir(tmp_path):
    """Config dir pointing storage at a temp DuckDB file, with logging silenced."""
    d = tmp_path / "config"
    d.mkdir()
    db_path = (tmp_path / "cli.duckdb").as_posix()
    (d / "default.toml").write_text(
        f'[market]\ndefault_liquidity = 10.0\n[storage]\ndb_path = "{db_path}"\n[logging]\nlevel = "CRITICAL"\n',
        encoding="utf-8",
    )
    return d
