"""Adapter interfaces consumed by the pipelines.

The core never talks to a network or a filesystem directly. It takes
objects satisfying these protocols, so the message source and the
protocol reader can be swapped independently (tests use the in-memory
implementations below).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, runtime_checkable

from .models import MessageRecord, ParticipantId, TrustSignal, to_utc


@runtime_checkable
class MessageStore(Protocol):
    """Source of message records for a pair of participants."""

    def fetch_messages(
        self,
        participant_a: ParticipantId,
        participant_b: ParticipantId,
        since: datetime | None = None,
    ) -> list[MessageRecord]:
        """Return records where both participants appear as sender or recipient.

        Records may be returned in any order.
        """
        ...


@runtime_checkable
class SignalReader(Protocol):
    """Source of existence and stake facts about an identity."""

    def read_identity_signal(self, identity_key: str) -> TrustSignal:
        """Resolve identity, claim and stake facts for ``identity_key``."""
        ...


class InMemoryMessageStore:
    """MessageStore over a fixed list of records."""

    def __init__(self, messages: Iterable[MessageRecord] = ()):
        self._messages = list(messages)

    def add(self, message: MessageRecord) -> None:
        self._messages.append(message)

    def fetch_messages(
        self,
        participant_a: ParticipantId,
        participant_b: ParticipantId,
        since: datetime | None = None,
    ) -> list[MessageRecord]:
        pair = {participant_a, participant_b}
        result = [m for m in self._messages if {m.sender, m.recipient} == pair]
        if since is not None:
            cutoff = to_utc(since)
            result = [m for m in result if m.timestamp >= cutoff]
        return result


class InMemorySignalReader:
    """SignalReader over a dict of identity key -> signal.

    Unknown keys read as a non-existent identity.
    """

    def __init__(self, signals: dict[str, TrustSignal] | None = None):
        self._signals = dict(signals or {})

    def set_signal(self, identity_key: str, signal: TrustSignal) -> None:
        self._signals[identity_key] = signal

    def read_identity_signal(self, identity_key: str) -> TrustSignal:
        return self._signals.get(identity_key, TrustSignal(identity_exists=False))
