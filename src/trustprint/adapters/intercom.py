# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Trustprint Contributors

"""Message store over an intercom directory of Markdown message files.

Each message is one file, named after its direction (``axiom-to-veritas-*.md``),
with a small header block and a body fenced by ``---``::

    From: axiom
    To: veritas
    Time: 2026-02-01T10:00:00Z
    ---
    body text
    ---

Only the header fields and the body length are kept; the body itself never
leaves this module. Bytes that are not valid UTF-8 decode as U+FFFD, and
body length is counted in UTF-16 code units, so lengths match what other
implementations of the fingerprint compute for the same files.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path

from ..core.exceptions import AdapterError
from ..core.logging import adapter_logger
from ..core.models import MessageRecord, ParticipantId, to_utc

logger = logging.getLogger(__name__)

ADAPTER_NAME = "intercom"
HEADER_LINES = 10
BODY_FENCE = "---"


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units; characters outside the BMP count twice."""
    return len(text.encode("utf-16-le")) // 2


def parse_message_file(text: str) -> tuple[str | None, str | None, datetime | None, int]:
    """Parse header fields and body length from a message file.

    Returns:
        (sender, recipient, time, body_length); missing or unparsable
        headers come back as None.
    """
    sender = recipient = None
    sent_at = None
    for line in text.split("\n")[:HEADER_LINES]:
        if line.startswith("From:"):
            sender = line[len("From:"):].strip().lower() or None
        elif line.startswith("To:"):
            recipient = line[len("To:"):].strip().lower() or None
        elif line.startswith("Time:"):
            raw = line[len("Time:"):].strip()
            try:
                sent_at = to_utc(datetime.fromisoformat(raw))
            except ValueError:
                logger.debug(f"Unparsable Time header: {raw!r}")
                sent_at = None

    body_start = text.find(BODY_FENCE + "\n")
    body_end = text.rfind(BODY_FENCE)
    if body_start > 0:
        start = body_start + len(BODY_FENCE) + 1
        body = text[start:body_end] if body_end > body_start else text[start:]
    else:
        body = ""
    return sender, recipient, sent_at, utf16_length(body)


class IntercomMessageStore:
    """MessageStore reading ``*.md`` message files from a directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()

    def _candidate_files(self, participant_a: str, participant_b: str) -> list[Path]:
        try:
            entries = sorted(self.directory.iterdir())
        except OSError as e:
            raise AdapterError(ADAPTER_NAME, f"cannot list {self.directory}: {e}") from e

        markers = (
            f"to-{participant_a}",
            f"to-{participant_b}",
            f"{participant_a}-to-",
            f"{participant_b}-to-",
        )
        candidates = []
        for path in entries:
            name = path.name
            if not name.endswith(".md") or "last-read" in name:
                continue
            if any(marker in name.lower() for marker in markers):
                candidates.append(path)
        return candidates

    def fetch_messages(
        self,
        participant_a: ParticipantId,
        participant_b: ParticipantId,
        since: datetime | None = None,
    ) -> list[MessageRecord]:
        """Return message records exchanged between the two participants.

        Raises:
            AdapterError: If the directory or a message file cannot be read.
        """
        a, b = participant_a.lower(), participant_b.lower()
        cutoff = to_utc(since) if since is not None else None
        adapter_logger.log_call(
            ADAPTER_NAME,
            "fetch_messages",
            {"directory": str(self.directory), "participants": [a, b], "since": cutoff},
        )
        started = time.monotonic()

        records: list[MessageRecord] = []
        for path in self._candidate_files(a, b):
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning(f"Failed to read message file {path.name}: {e}")
                raise AdapterError(ADAPTER_NAME, f"cannot read {path.name}: {e}") from e

            sender, recipient, sent_at, body_length = parse_message_file(text)
            if sender is None or sent_at is None:
                logger.debug(f"Skipping {path.name}: missing From or Time header")
                continue
            if {sender, recipient} != {a, b}:
                continue
            if cutoff is not None and sent_at < cutoff:
                continue
            records.append(
                MessageRecord(sender=sender, recipient=recipient, timestamp=sent_at, body_length=body_length)
            )

        adapter_logger.log_result(
            ADAPTER_NAME, "fetch_messages", True, duration_ms=(time.monotonic() - started) * 1000
        )
        logger.debug(f"Read {len(records)} messages between {a} and {b}")
        return records
