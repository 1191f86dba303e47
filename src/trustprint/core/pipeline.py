"""Pipeline orchestration over injected adapters.

Two independent pipelines:

    MessageStore -> compute_rhythm -> build_commitment
    SignalReader -> evaluate_trust

``FingerprintService.run`` executes both concurrently and records a
failure in one without blocking the other. The stages themselves never
catch adapter errors; if an adapter call fails the pure stages are simply
not reached.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Sequence
from datetime import datetime

from .adapters import MessageStore, SignalReader
from .commitment import build_commitment
from .config import get_config
from .evaluation import evaluate_trust
from .exceptions import ConfigException, TrustprintException
from .logging import correlation_context, get_correlation_id
from .models import ExchangeFingerprint, ParticipantId, TrustThreshold, TrustVerdict, sort_participants
from .report import StructuredReport, format_report
from .rhythm import compute_rhythm

logger = logging.getLogger(__name__)

EXCHANGE_PIPELINE = "exchange"
TRUST_PIPELINE = "trust"


class FingerprintService:
    """Runs the exchange and trust pipelines over the given adapters.

    Either adapter may be omitted when only one pipeline is needed.
    """

    def __init__(
        self,
        message_store: MessageStore | None = None,
        signal_reader: SignalReader | None = None,
    ) -> None:
        self._messages = message_store
        self._signals = signal_reader

    def fingerprint_exchange(
        self,
        participant_a: ParticipantId,
        participant_b: ParticipantId,
        since: datetime | None = None,
    ) -> ExchangeFingerprint:
        """Fetch a transcript and derive its rhythm and commitment.

        Raises:
            ConfigException: If no message store was injected.
            InsufficientDataError: If fewer than two messages were found.
            AdapterError: If the message store fails.
        """
        if self._messages is None:
            raise ConfigException("No message store configured", missing=["message_store"])

        pair = sort_participants((participant_a, participant_b))
        started = time.monotonic()
        messages = self._messages.fetch_messages(pair[0], pair[1], since=since)
        rhythm = compute_rhythm(messages)
        commitment = build_commitment(pair, messages, rhythm)
        logger.info(
            f"Exchange fingerprint {pair[0]} <-> {pair[1]}: {rhythm.message_count} messages "
            f"({(time.monotonic() - started) * 1000:.1f}ms)"
        )
        return ExchangeFingerprint(rhythm=rhythm, commitment=commitment)

    def evaluate_identity(
        self,
        identity_key: str,
        threshold: TrustThreshold | None = None,
    ) -> TrustVerdict:
        """Read the signal for an identity and evaluate it.

        Raises:
            ConfigException: If no signal reader was injected.
            InvalidSignalError: If the reader returned negative stakes.
            AdapterError: If the signal reader fails.
        """
        if self._signals is None:
            raise ConfigException("No signal reader configured", missing=["signal_reader"])

        threshold = threshold or get_config().default_threshold
        signal = self._signals.read_identity_signal(identity_key)
        verdict = evaluate_trust(signal, threshold)
        logger.info(f"Trust verdict for {identity_key}: {verdict.reason.value}")
        return verdict

    async def run(
        self,
        participants: Sequence[ParticipantId] | None = None,
        identity_key: str | None = None,
        threshold: TrustThreshold | None = None,
        since: datetime | None = None,
    ) -> StructuredReport:
        """Run the requested pipelines concurrently and merge the results.

        A ``TrustprintException`` raised in one pipeline is recorded under
        that pipeline's name in ``report.errors``; any other exception
        propagates once both pipelines have finished, after logging at ERROR
        any result from the other pipeline that is being discarded.
        """
        with correlation_context(get_correlation_id()):
            jobs: dict[str, Awaitable[object]] = {}
            if participants is not None:
                pair = sort_participants(participants)
                jobs[EXCHANGE_PIPELINE] = asyncio.to_thread(self.fingerprint_exchange, pair[0], pair[1], since)
            if identity_key is not None:
                jobs[TRUST_PIPELINE] = asyncio.to_thread(self.evaluate_identity, identity_key, threshold)

            results = await asyncio.gather(*jobs.values(), return_exceptions=True)

        outcomes = dict(zip(jobs.keys(), results))
        errors: dict[str, TrustprintException] = {}
        unexpected: tuple[str, BaseException] | None = None
        for name, outcome in outcomes.items():
            if isinstance(outcome, TrustprintException):
                logger.warning(f"Pipeline '{name}' failed: {outcome.message}")
                errors[name] = outcome
            elif isinstance(outcome, BaseException) and unexpected is None:
                unexpected = (name, outcome)

        if unexpected is not None:
            failed, exc = unexpected
            for name, outcome in outcomes.items():
                if name != failed and not isinstance(outcome, BaseException):
                    logger.error(f"Pipeline '{name}' completed but its result is discarded: '{failed}' raised {exc!r}")
            raise exc

        fingerprint = outcomes.get(EXCHANGE_PIPELINE)
        if not isinstance(fingerprint, ExchangeFingerprint):
            fingerprint = None
        verdict = outcomes.get(TRUST_PIPELINE)
        if not isinstance(verdict, TrustVerdict):
            verdict = None

        return format_report(
            commitment=fingerprint.commitment if fingerprint else None,
            rhythm=fingerprint.rhythm if fingerprint else None,
            verdict=verdict,
            errors=errors,
        )
