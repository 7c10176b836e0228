from __future__ import annotations

import logging
from typing import Optional

import requests

from tracker.config import Settings
from tracker.errors import StoreReadError
from tracker.services.branches import Branch, get_branch, list_branches
from tracker.services.entries import SaveResult, list_entries
from tracker.services.executives import executive_names
from tracker.services.reports import (
    EntryNotice,
    format_branch_status_update,
    format_entry_notification,
    format_summary_report,
    summarize_branches,
)

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"


def send_message(text: str, settings: Settings) -> bool:
    """Send one HTML message to the configured Telegram chat. Never raises."""
    if not settings.telegram_configured:
        logger.warning("Telegram is not configured; message not sent")
        return False

    url = f"{TELEGRAM_API}/bot{settings.telegram_bot_token}/sendMessage"
    try:
        resp = requests.post(
            url,
            json={"chat_id": settings.telegram_chat_id, "text": text, "parse_mode": "HTML"},
            timeout=settings.notify_timeout,
        )
    except requests.RequestException as e:
        logger.warning("Telegram send error: %s", e)
        return False

    if not resp.ok:
        logger.warning("Telegram rejected message: HTTP %s %s", resp.status_code, resp.text[:200])
        return False

    logger.info("Telegram message sent (%d chars)", len(text))
    return True


def send_entry_notification(
    conn,
    result: SaveResult,
    settings: Settings,
    *,
    branch: Optional[Branch] = None,
) -> bool:
    """Notify about a committed entry. A failed name lookup returns False, never raises."""
    entry = result.entry
    try:
        branch = branch or get_branch(conn, entry.branch_id)
        names = executive_names(conn, entry.branch_id)
    except StoreReadError:
        logger.warning("Entry %s saved but names could not be loaded; notification skipped", entry.id)
        return False
    notice = EntryNotice(
        branch_name=branch.name if branch else "Unknown",
        executive_name=names.get(entry.executive_id, "Unknown"),
        entry_date=entry.entry_date,
        target=entry.target,
        achieved=entry.achieved,
        cash=entry.cash,
        is_update=result.is_update,
    )
    return send_message(format_entry_notification(notice), settings)


def send_branch_status_update(conn, report_date: str, settings: Settings) -> bool:
    branches = list_branches(conn)
    entries = list_entries(conn, entry_date=report_date)
    return send_message(format_branch_status_update(report_date, branches, entries), settings)


def send_summary_report(conn, report_date: str, settings: Settings) -> bool:
    summaries = summarize_branches(list_branches(conn), list_entries(conn, entry_date=report_date))
    return send_message(format_summary_report(report_date, summaries), settings)
