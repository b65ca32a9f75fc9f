import pytest

from config.settings import base


def test_sqlite_takes_write_lock_at_begin():
    default = base.DATABASES["default"]
    if not default["ENGINE"].endswith("sqlite3"):
        pytest.skip("DB_ENGINE points at another backend")
    assert default["OPTIONS"]["transaction_mode"] == "IMMEDIATE"
