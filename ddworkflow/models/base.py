"""Declarative base and mixins."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for the engine's repository and runtime tables."""


class CreatedAtMixin:
    """Rows are written once; only their creation time is tracked."""

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
