import os
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import psycopg
import pytest

from narrative_audit.config.settings import Settings
from narrative_audit.database import connection
from narrative_audit.database.connection import (
    build_conninfo,
    close_pool,
    get_connection,
    init_pool,
)
from narrative_audit.database.models import UserRecord

SCHEMA_PATH = Path(connection.__file__).with_name("schema.sql")


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "narrative_audit_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    # The pool retries in the background, so connect directly once first.
    try:
        with psycopg.connect(build_conninfo(test_settings), connect_timeout=3) as conn:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            conn.commit()
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    init_pool(test_settings)
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def seed_user(db_conn: psycopg.Connection[Any]) -> Generator[UserRecord, None, None]:
    with db_conn.cursor() as cur:
        cur.execute(
            """
            INSERT INTO users (email, name, purchase_tier)
            VALUES (%s, %s, %s)
            RETURNING id
            """,
            ("buyer@example.com", "Dana", "full"),
        )
        row = cur.fetchone()
        assert row is not None
        user_id = str(row[0])
    db_conn.commit()
    try:
        yield UserRecord(id=user_id, email="buyer@example.com", name="Dana", purchase_tier="full")
    finally:
        # uploads, analyses and email_logs cascade
        with db_conn.cursor() as cur:
            cur.execute("DELETE FROM users WHERE id = %s", (user_id,))
        db_conn.commit()


@pytest.fixture
def seed_uploads(
    db_conn: psycopg.Connection[Any],
    seed_user: UserRecord,
) -> datetime:
    """Insert one stale and two recent uploads; return the reference time."""
    now = datetime.now(UTC)
    rows = [
        ("old.pdf", now - timedelta(hours=2)),
        ("deck.pdf", now - timedelta(minutes=5)),
        ("about.html", now - timedelta(minutes=1)),
    ]
    with db_conn.cursor() as cur:
        for filename, uploaded_at in rows:
            cur.execute(
                """
                INSERT INTO uploads (user_id, filename, file_path, file_size, uploaded_at)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (seed_user.id, filename, f"{seed_user.id}/{filename}", 1024, uploaded_at),
            )
    db_conn.commit()
    return now
