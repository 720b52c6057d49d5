"""Inbound file-processing event passed to direct debit workflows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IncomingMessage:
    """Describes one file received for processing. No validation is applied."""

    file_data_seq: Optional[int]
    channel_ref: Optional[str]
    output_channel_code: Optional[str]
    file_s3_path: Optional[str]
