from __future__ import annotations

from ..extensions import db


class AuditMixin:
    """
    created/updated by + at columns shared by every top-level record.

    Values are assigned explicitly by the services (no ORM hooks, no server
    defaults) so attribution and timestamps are visible in the code that
    performs the write. Timestamps are UTC-naive.
    """
    created_by = db.Column(db.String(100), nullable=False)
    updated_by = db.Column(db.String(100), nullable=False)
    created_datetime = db.Column(db.DateTime(timezone=True), nullable=False, index=True)
    updated_datetime = db.Column(db.DateTime(timezone=True), nullable=False)

    def stamp_created(self, actor: str, now) -> None:
        self.created_by = actor
        self.updated_by = actor
        self.created_datetime = now
        self.updated_datetime = now

    def stamp_updated(self, actor: str, now) -> None:
        self.updated_by = actor
        self.updated_datetime = now
