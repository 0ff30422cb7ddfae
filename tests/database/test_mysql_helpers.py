from datetime import time, timedelta
from pathlib import Path

import pytest
from mysql.connector import errorcode, errors

from workforce_engine.core.exceptions import ConflictError, UnavailableError
from workforce_engine.database import bootstrap
from workforce_engine.database.bootstrap import SCHEMA_PATH, _strip_comments, iter_sql_statements
from workforce_engine.database.connection import Transaction, translate_errors
from workforce_engine.database.mysql_base import db_cursor, lock_clause, normalize_mysql_time


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        (time(8, 30), time(8, 30)),
        (timedelta(hours=9, minutes=15), time(9, 15)),
        ("17:45", time(17, 45)),
        ("06:05:30", time(6, 5, 30)),
    ],
)
def test_normalize_mysql_time(value, expected):
    assert normalize_mysql_time(value) == expected


def test_normalize_mysql_time_rejects_garbage():
    with pytest.raises(ValueError):
        normalize_mysql_time("nine")
    with pytest.raises(TypeError):
        normalize_mysql_time(9.5)


def test_duplicate_key_becomes_conflict():
    with pytest.raises(ConflictError):
        with translate_errors():
            raise errors.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)


def test_racing_insert_deadlock_becomes_conflict():
    with pytest.raises(ConflictError):
        with translate_errors():
            raise errors.get_mysql_exception(
                errorcode.ER_LOCK_DEADLOCK,
                msg="Deadlock found when trying to get lock; try restarting transaction",
                sqlstate="40001",
            )


def test_other_integrity_errors_propagate():
    with pytest.raises(errors.IntegrityError):
        with translate_errors():
            raise errors.IntegrityError(msg="FK fails", errno=errorcode.ER_NO_REFERENCED_ROW_2)


def test_lost_connection_becomes_unavailable():
    with pytest.raises(UnavailableError):
        with translate_errors():
            raise errors.OperationalError(msg="Lost connection")


def test_db_cursor_joins_given_transaction():
    tx = Transaction(conn="conn", cur="cur")

    with db_cursor(None, tx=tx) as (conn, cur):
        assert (conn, cur) == ("conn", "cur")


def test_lock_clause():
    assert lock_clause(True) == " FOR UPDATE"
    assert lock_clause(False) == ""


def test_sql_splitter_keeps_quoted_semicolons():
    sql = "INSERT INTO t VALUES ('a;b');\nSELECT 1;\n  "

    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]


def test_schema_defines_every_table():
    statements = list(iter_sql_statements(_strip_comments(SCHEMA_PATH.read_text(encoding="utf-8"))))

    created = [s.split()[5] for s in statements if s.upper().startswith("CREATE TABLE")]
    assert created == ["staff", "shifts", "attendance", "pto_requests", "payroll_runs"]
    assert any("uq_attendance_shift_date (shift_id, work_date)" in s for s in statements)


def test_schema_ships_inside_the_package():
    assert SCHEMA_PATH.parent == Path(bootstrap.__file__).resolve().parent
    assert SCHEMA_PATH.is_file()
