"""CLI helpers for loading and saving the application snapshot.

The group callback opens the snapshot once per invocation; commands read it
with ``get_snapshot`` and hand back their result with ``commit``. The
snapshot is written once, when the click context closes, and only if
something changed.
"""

import logging
from datetime import date

import click

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Snapshot
from ledgerbook.domain.recurrence import RecurringService
from ledgerbook.domain.snapshot import initial_snapshot

logger = logging.getLogger(__name__)


def open_snapshot(db: Database, today: date) -> tuple[Snapshot, bool]:
    """Load the stored snapshot and bring recurring postings up to date.

    A missing snapshot is created with the defaults and the sales week of
    ``today``.

    Returns:
        Tuple of (snapshot, whether it differs from what is stored)
    """
    snapshot = db.load_snapshot()
    dirty = False
    if snapshot is None:
        logger.info("No stored data found, starting a new ledger")
        snapshot = initial_snapshot(today)
        dirty = True

    rolled = RecurringService(snapshot).rollforward(today).snapshot
    return rolled, dirty or rolled != snapshot


def get_snapshot(ctx: click.Context) -> Snapshot:
    return ctx.obj["snapshot"]


def commit(ctx: click.Context, snapshot: Snapshot) -> None:
    """Replace the working snapshot; it is saved when the command ends."""
    ctx.obj["snapshot"] = snapshot
    ctx.obj["dirty"] = True


def save_if_dirty(ctx: click.Context) -> None:
    db = ctx.obj["db"]
    if ctx.obj.get("dirty"):
        db.save_snapshot(ctx.obj["snapshot"])
        ctx.obj["dirty"] = False
    db.disconnect()
