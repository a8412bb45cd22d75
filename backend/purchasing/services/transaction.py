# Overview: Transaction scoping for service-layer writes.

from __future__ import annotations

from contextlib import contextmanager

from ..extensions import db


@contextmanager
def atomic():
    """
    One logical write = one transaction.

    Commits when the block finishes, rolls back and re-raises on any error so
    a header is never left without its details (or the reverse).

    NOTE: no row locking and no version column. Two concurrent updates of the
    same record are last-write-wins.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
