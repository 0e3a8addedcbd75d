"""Scheduled triggers, exposed as Flask CLI commands.

The hosting scheduler (cron / Cloud Scheduler) runs them at fixed times in
the organization timezone, e.g. ``flask --app nxtprof.main end-session
standups`` at 09:15 Mon-Sat. Failures are logged and turn into exit code 1;
the next scheduled run is the retry.
"""

from __future__ import annotations

import logging
import sys
from datetime import date
from typing import Optional

import click
from flask import current_app
from flask.cli import with_appcontext

from .common.datetime_utils import parse_iso_date, session_id_for
from .container import Container
from .core.enums import SessionType
from .core.exceptions import ValidationError

logger = logging.getLogger(__name__)

SESSION_TYPE = click.Choice([t.value for t in SessionType])


def _container() -> Container:
    return current_app.extensions["nxtprof"]


def _day(value: Optional[str]) -> date:
    if not value:
        return _container().session_scheduler.today()
    try:
        return parse_iso_date(value)
    except ValidationError as e:
        logger.error("Invalid --date %r: %s", value, e)
        sys.exit(1)


def _transition(action: str, session_type: str, date_s: Optional[str]) -> None:
    st = SessionType(session_type)
    session_id = session_id_for(_day(date_s))
    try:
        result = getattr(_container().session_scheduler, action)(st, session_id)
    except Exception:
        logger.exception(
            "Scheduled %s failed",
            action,
            extra={"session_type": st.value, "session_id": session_id},
        )
        sys.exit(1)
    click.echo(result.message)


@click.command("schedule-session")
@click.argument("session_type", type=SESSION_TYPE)
@click.option("--date", "date_s", help="YYYY-MM-DD, defaults to today")
@with_appcontext
def schedule_session(session_type, date_s):
    """Create today's session document (skips non-working days)."""
    st = SessionType(session_type)
    day = _day(date_s)
    try:
        result = _container().session_scheduler.schedule(st, day)
    except Exception:
        logger.exception(
            "Scheduled schedule failed",
            extra={"session_type": st.value, "session_id": session_id_for(day)},
        )
        sys.exit(1)
    click.echo(result.message)


@click.command("activate-session")
@click.argument("session_type", type=SESSION_TYPE)
@click.option("--date", "date_s", help="YYYY-MM-DD, defaults to today")
@with_appcontext
def activate_session(session_type, date_s):
    """Start a scheduled session and reset its live attendance."""
    _transition("activate", session_type, date_s)


@click.command("end-session")
@click.argument("session_type", type=SESSION_TYPE)
@click.option("--date", "date_s", help="YYYY-MM-DD, defaults to today")
@with_appcontext
def end_session(session_type, date_s):
    """End an active session and write its attendance records."""
    _transition("end", session_type, date_s)


@click.command("sync-attendance")
@click.option("--date", "date_s", help="YYYY-MM-DD, defaults to today")
@click.option("--session-type", type=SESSION_TYPE, help="Only this session type")
@with_appcontext
def sync_attendance(date_s, session_type):
    """Sync the day's attendance of every session type to the sheet."""
    day = session_id_for(_day(date_s))
    types = [SessionType(session_type)] if session_type else list(SessionType)

    failed = False
    for st in types:
        # Each session type is synced on its own; one failure never skips the next.
        try:
            result = _container().attendance_sync.sync(day, st)
            click.echo(f"{st.value}: {result.message}")
        except Exception:
            failed = True
            logger.exception(
                "Scheduled attendance sync failed",
                extra={"date": day, "session_type": st.value},
            )
    if failed:
        sys.exit(1)


@click.command("sync-learning-points")
@click.option("--date", "date_s", help="YYYY-MM-DD, defaults to today")
@with_appcontext
def sync_learning_points(date_s):
    """Sync the locked learning points of the day's learning-hour session."""
    session_id = session_id_for(_day(date_s))
    try:
        result = _container().learning_sync.sync(session_id)
    except Exception:
        logger.exception("Scheduled learning points sync failed", extra={"session_id": session_id})
        sys.exit(1)
    click.echo(result.message)


ALL_COMMANDS = (
    schedule_session,
    activate_session,
    end_session,
    sync_attendance,
    sync_learning_points,
)


def register(app) -> None:
    for command in ALL_COMMANDS:
        app.cli.add_command(command)
