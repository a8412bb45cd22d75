from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z
from .audit import AuditMixin


class User(AuditMixin, db.Model):
    """
    Directory entry for a person who can be attributed on records.

    Email is globally unique. The service checks before writing; the
    constraint is the backstop for concurrent writers.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_users_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(500), nullable=False)
    last_name = db.Column(db.String(500), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(20), nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "createdBy": self.created_by,
            "updatedBy": self.updated_by,
            "createdDatetime": to_utc_z(self.created_datetime),
            "updatedDatetime": to_utc_z(self.updated_datetime),
        }
