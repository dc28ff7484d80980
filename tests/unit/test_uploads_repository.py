from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

from narrative_audit.database.repositories.uploads_repository import UploadsRepository

PATCH_TARGET = "narrative_audit.database.repositories.uploads_repository.get_connection"
SINCE = datetime(2026, 3, 1, 11, 50, tzinfo=UTC)


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestFindRecentForUser:
    @patch(PATCH_TARGET)
    def test_maps_rows_in_order(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [
            {
                "id": 1,
                "user_id": "user-1",
                "filename": "deck.pdf",
                "file_path": "user-1/deck.pdf",
                "file_size": 2048,
                "uploaded_at": SINCE,
            },
            {
                "id": 2,
                "user_id": "user-1",
                "filename": "about.html",
                "file_path": "user-1/about.html",
                "file_size": None,
                "uploaded_at": SINCE,
            },
        ]

        result = UploadsRepository().find_recent_for_user("user-1", SINCE)

        assert [upload.filename for upload in result] == ["deck.pdf", "about.html"]
        assert result[0].id == "1"
        assert result[0].file_size == 2048
        assert result[1].file_size == 0
        assert mock_cursor.execute.call_args.args[1] == ("user-1", SINCE)

    @patch(PATCH_TARGET)
    def test_returns_empty_list(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = []

        assert UploadsRepository().find_recent_for_user("user-1", SINCE) == []
