# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Trustprint Contributors

"""Commitment hashes for an exchange between two participants.

Three layered SHA-256 hashes let both parties confirm they observed the
same interaction pattern without sharing what was said:

    commitment       = sha256("a:b" || first timestamp)[:16]
    rhythm_signature = sha256(canonical rhythm JSON)[:16]
    exchange_hash    = sha256(commitment || rhythm_signature || last timestamp)

Participants are sorted first, so either side may run the computation.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import re
from collections.abc import Sequence
from typing import Any

from .exceptions import InsufficientDataError, ValidationException
from .models import (
    ExchangeCommitment,
    MessageRecord,
    ParticipantId,
    RhythmMetrics,
    format_instant,
    sort_participants,
)
from .rhythm import sort_messages

logger = logging.getLogger(__name__)

MIN_MESSAGES = 2
SHORT_HASH_CHARS = 16

_HEX_RE = re.compile(r"^[0-9a-f]+$")


def _canonical_number(value: Any) -> Any:
    # Integral floats serialise without a fractional part (1.0 -> 1)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def canonical_rhythm_json(rhythm: RhythmMetrics) -> str:
    """Compact JSON of the four signature fields, in fixed key order."""
    fields = {k: _canonical_number(v) for k, v in rhythm.signature_fields().items()}
    return json.dumps(fields, separators=(",", ":"))


def _sha256_hex(*parts: str) -> str:
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part.encode("utf-8"))
    return digest.hexdigest()


def build_commitment(
    participants: Sequence[ParticipantId],
    messages: Sequence[MessageRecord],
    rhythm: RhythmMetrics,
) -> ExchangeCommitment:
    """Derive the commitment, rhythm signature and exchange hash.

    Args:
        participants: The two participants, in any order.
        messages: The transcript the rhythm was computed from (any order).
        rhythm: Metrics from ``compute_rhythm`` for the same transcript.

    Returns:
        ExchangeCommitment with ``0x``-prefixed hashes.

    Raises:
        InsufficientDataError: If fewer than two messages are given.
        ValidationException: If ``participants`` is not two distinct ids.
    """
    if len(messages) < MIN_MESSAGES:
        raise InsufficientDataError(len(messages), MIN_MESSAGES)

    pair = sort_participants(participants)
    ordered = sort_messages(messages)
    first, last = ordered[0], ordered[-1]

    commitment = _sha256_hex(":".join(pair), format_instant(first.timestamp))[:SHORT_HASH_CHARS]
    rhythm_sig = _sha256_hex(canonical_rhythm_json(rhythm))[:SHORT_HASH_CHARS]
    exchange_hash = _sha256_hex(commitment, rhythm_sig, format_instant(last.timestamp))

    logger.debug(f"Commitment built for {pair[0]} <-> {pair[1]} over {len(ordered)} messages")

    return ExchangeCommitment(
        commitment="0x" + commitment,
        rhythm_signature="0x" + rhythm_sig,
        exchange_hash="0x" + exchange_hash,
        participants=pair,
        period_start=first.timestamp,
        period_end=last.timestamp,
    )


def normalize_hash(value: str) -> str:
    """Lowercase a hex hash and strip an optional ``0x`` prefix.

    Raises:
        ValidationException: If the remainder is empty or not hex.
    """
    text = value.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if not text or not _HEX_RE.match(text):
        raise ValidationException("Hash must be a hex string", field="hash", value=value)
    return text


def commitments_agree(local: ExchangeCommitment | str, remote: ExchangeCommitment | str) -> bool:
    """Compare two exchange hashes in constant time.

    This is the mutual-consent check: each party computes its own hash
    locally and only the hashes are exchanged.
    """
    local_hex = normalize_hash(local.exchange_hash if isinstance(local, ExchangeCommitment) else local)
    remote_hex = normalize_hash(remote.exchange_hash if isinstance(remote, ExchangeCommitment) else remote)
    return hmac.compare_digest(local_hex, remote_hex)
