from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from tracker.config import Settings
from tracker.services.audit import Figures
from tracker.services.entries import save_entry
from tracker.services.notify import (
    send_branch_status_update,
    send_entry_notification,
    send_message,
    send_summary_report,
)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path,
        db_path=tmp_path / "app.db",
        telegram_bot_token="123:abc",
        telegram_chat_id="42",
        notify_timeout=5.0,
    )


def _ok():
    return MagicMock(ok=True, status_code=200, text="{}")


class TestSendMessage:
    def test_posts_html_message(self, settings):
        with patch("tracker.services.notify.requests.post", return_value=_ok()) as post:
            assert send_message("<b>hi</b>", settings) is True
        url = post.call_args.args[0]
        assert url == "https://api.telegram.org/bot123:abc/sendMessage"
        assert post.call_args.kwargs["json"] == {"chat_id": "42", "text": "<b>hi</b>", "parse_mode": "HTML"}
        assert post.call_args.kwargs["timeout"] == 5.0

    def test_http_error_is_false(self, settings):
        resp = MagicMock(ok=False, status_code=401, text="Unauthorized")
        with patch("tracker.services.notify.requests.post", return_value=resp):
            assert send_message("x", settings) is False

    def test_network_error_is_false(self, settings):
        with patch("tracker.services.notify.requests.post", side_effect=requests.ConnectionError("down")):
            assert send_message("x", settings) is False

    def test_unconfigured_is_false_without_request(self, tmp_path):
        unconfigured = Settings(data_dir=tmp_path, db_path=tmp_path / "app.db")
        with patch("tracker.services.notify.requests.post") as post:
            assert send_message("x", unconfigured) is False
        post.assert_not_called()


def test_entry_notification_uses_store_names(conn, branch_id, executive_id, settings):
    first = save_entry(
        conn, branch_id=branch_id, executive_id=executive_id, entry_date="2024-05-01",
        figures=Figures(100, 70, 50), editor="m",
    )
    again = save_entry(
        conn, branch_id=branch_id, executive_id=executive_id, entry_date="2024-05-01",
        figures=Figures(100, 80, 50), editor="m",
    )
    with patch("tracker.services.notify.requests.post", return_value=_ok()) as post:
        assert send_entry_notification(conn, first, settings) is True
        assert send_entry_notification(conn, again, settings) is True

    texts = [c.kwargs["json"]["text"] for c in post.call_args_list]
    assert texts[0].startswith("📝 New Entry")
    assert "<b>Central</b>" in texts[0] and "Executive: Asha" in texts[0]
    assert texts[0].endswith("🟡 Achievement: 70.0%")
    assert texts[1].startswith("✏️ Updated")


def test_status_update_and_summary_from_store(conn, branch_id, executive_id, settings):
    save_entry(
        conn, branch_id=branch_id, executive_id=executive_id, entry_date="2024-05-01",
        figures=Figures(100, 95, 50), editor="m",
    )
    with patch("tracker.services.notify.requests.post", return_value=_ok()) as post:
        assert send_branch_status_update(conn, "2024-05-01", settings) is True
        assert send_summary_report(conn, "2024-05-02", settings) is True

    status, summary = [c.kwargs["json"]["text"] for c in post.call_args_list]
    assert "🟢 Central: 95/100 (95%)" in status
    assert "Entered (1/1)" in status
    assert "⚠️ Central" in summary
    assert summary.endswith("Branches Reported: 0/1")


def test_entry_notification_store_failure_is_false(conn, branch_id, executive_id, settings):
    result = save_entry(
        conn, branch_id=branch_id, executive_id=executive_id, entry_date="2024-05-01",
        figures=Figures(100, 70, 50), editor="m",
    )
    conn.close()
    with patch("tracker.services.notify.requests.post") as post:
        assert send_entry_notification(conn, result, settings) is False
    post.assert_not_called()
