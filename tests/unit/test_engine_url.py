# tests/unit/test_engine_url.py
import pytest

from erp.db.engine import normalize_async_dsn


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("postgresql://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
        ("postgres://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
        ("postgresql+psycopg://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
        ("sqlite:///./erp.db", "sqlite+aiosqlite:///./erp.db"),
        ('"sqlite+aiosqlite://"', "sqlite+aiosqlite://"),
    ],
)
def test_normalize_async_dsn(raw, expected):
    assert normalize_async_dsn(raw) == expected
