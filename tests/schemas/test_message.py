from __future__ import annotations

import dataclasses

import pytest

from ddworkflow.schemas import IncomingMessage


def test_incoming_message_is_a_frozen_value() -> None:
    message = IncomingMessage(
        file_data_seq=1042,
        channel_ref="BACS",
        output_channel_code="DD01",
        file_s3_path="s3://direct-debit/in/1042.csv",
    )

    assert message == IncomingMessage(1042, "BACS", "DD01", "s3://direct-debit/in/1042.csv")
    with pytest.raises(dataclasses.FrozenInstanceError):
        message.channel_ref = "FPS"  # type: ignore[misc]


def test_incoming_message_accepts_missing_fields() -> None:
    message = IncomingMessage(file_data_seq=None, channel_ref=None, output_channel_code="", file_s3_path=None)

    assert message.file_data_seq is None
    assert hash(message) == hash(IncomingMessage(None, None, "", None))
