"""Deployments and the process definitions they register."""

from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import ForeignKey, Index, Integer, LargeBinary, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ddworkflow.models.base import Base, CreatedAtMixin
from ddworkflow.models.types import GUID


class Deployment(CreatedAtMixin, Base):
    """A unit of resources registered with the engine in one call."""

    __tablename__ = "deployments"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    name: Mapped[Optional[str]] = mapped_column(String(length=255), nullable=True)

    resources: Mapped[List["DeploymentResource"]] = relationship(cascade="all, delete-orphan")


class DeploymentResource(Base):
    """Raw bytes of a deployed resource, as read from the classpath."""

    __tablename__ = "deployment_resources"
    __table_args__ = (
        UniqueConstraint("deployment_id", "name", name="uq_deployment_resources_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    deployment_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("deployments.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(length=512), nullable=False)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)


class ProcessDefinition(CreatedAtMixin, Base):
    """One version of an executable process, keyed by its BPMN process id."""

    __tablename__ = "process_definitions"
    __table_args__ = (
        UniqueConstraint("key", "version", name="uq_process_definitions_key_version"),
        Index("ix_process_definitions_key", "key"),
    )

    id: Mapped[str] = mapped_column(String(length=255), primary_key=True)
    key: Mapped[str] = mapped_column(String(length=255), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(length=255), nullable=True)
    resource_name: Mapped[str] = mapped_column(String(length=512), nullable=False)
    deployment_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("deployments.id", ondelete="CASCADE"),
        nullable=False,
    )
