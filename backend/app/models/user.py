"""
Questions Portal Backend — User SQLAlchemy Model
=================================================

What:  Minimal projection of the users table owned by the session provider.
How:   Questions, encounters and votes hold a nullable user_id pointing here.
       The reference is weak: deleting a user nulls it out, it never cascades.
Who:   Read by the question query service to display the author's name.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """A registered user. Only `name` is consumed by this service."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Display name; may be missing for accounts created by some providers
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}')>"
