"""Dry-run plan for recording an exchange on-chain.

An attestation writer records one exchange atom carrying the hash and a
``[participant][participatesIn][exchange]`` triple per participant. This
module only describes that plan; building and submitting transactions is
left to the writer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .models import ExchangeCommitment

PARTICIPATES_IN = "participatesIn"
# "0x" plus the first 16 hex chars of the exchange hash
EXCHANGE_LABEL_HASH_CHARS = 18


@dataclass(frozen=True)
class PlannedTriple:
    subject: str
    predicate: str
    object: str

    def __str__(self) -> str:
        return f"[{self.subject}] [{self.predicate}] [{self.object}]"


@dataclass(frozen=True)
class AttestationPlan:
    """What an attestation writer would create for one exchange."""

    exchange_atom: str
    exchange_hash: str
    triples: tuple[PlannedTriple, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "exchange_atom": self.exchange_atom,
            "exchange_hash": self.exchange_hash,
            "triples": [
                {"subject": t.subject, "predicate": t.predicate, "object": t.object}
                for t in self.triples
            ],
        }


def exchange_atom_label(label_a: str, label_b: str, exchange_hash: str) -> str:
    return f"{label_a}{label_b}Exchange:{exchange_hash[:EXCHANGE_LABEL_HASH_CHARS]}"


def plan_exchange_attestation(
    commitment: ExchangeCommitment,
    label_a: str | None = None,
    label_b: str | None = None,
) -> AttestationPlan:
    """Describe the atom and triples that would attest this exchange.

    Labels default to the commitment's sorted participants.
    """
    first, second = commitment.participants
    label_a = label_a or first
    label_b = label_b or second
    atom = exchange_atom_label(label_a, label_b, commitment.exchange_hash)
    return AttestationPlan(
        exchange_atom=atom,
        exchange_hash=commitment.exchange_hash,
        triples=(
            PlannedTriple(label_a, PARTICIPATES_IN, atom),
            PlannedTriple(label_b, PARTICIPATES_IN, atom),
        ),
    )
