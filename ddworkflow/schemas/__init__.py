"""Value objects exchanged with process instances."""

from ddworkflow.schemas.message import IncomingMessage

__all__ = ["IncomingMessage"]
