"""Persisted process instances."""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ddworkflow.models.base import Base, CreatedAtMixin
from ddworkflow.models.types import GUID, JSONType


class ProcessInstance(CreatedAtMixin, Base):
    """A running or completed execution of a process definition."""

    __tablename__ = "process_instances"
    __table_args__ = (
        Index("ix_process_instances_definition", "process_definition_id"),
        Index("ix_process_instances_business_key", "business_key"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    process_definition_id: Mapped[str] = mapped_column(
        String(length=255),
        ForeignKey("process_definitions.id"),
        nullable=False,
    )
    business_key: Mapped[Optional[str]] = mapped_column(String(length=255), nullable=True)
    ended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    suspended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # BpmnWorkflowSerializer output, including task data.
    state: Mapped[Dict[str, Any]] = mapped_column(JSONType(), nullable=False)
