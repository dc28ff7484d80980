from psycopg.rows import dict_row

from narrative_audit.database.connection import get_connection
from narrative_audit.database.models import UserRecord


class UsersRepository:
    """Read access to the users table."""

    def find_by_id(self, user_id: str) -> UserRecord | None:
        """Return the user, or None when no row matches."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, email, name, purchase_tier
                    FROM users
                    WHERE id::text = %s
                    """,
                    (user_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return UserRecord(
            id=str(row["id"]),
            email=row["email"],
            name=row["name"],
            purchase_tier=row["purchase_tier"],
        )
