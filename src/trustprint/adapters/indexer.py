# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Trustprint Contributors

"""Signal reader over the protocol's GraphQL indexer.

Resolves, for one identity key:
- the identity atom (existence)
- the ``[atom] [is] [AI Agent]`` claim triple (existence, for/against stake)
- every other triple with the atom as subject (relationship facts)

Indexer lag is this adapter's concern; the evaluation engine takes whatever
is returned at face value.
"""

from __future__ import annotations

import json
import logging
import re
import time
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from ..core.config import get_config
from ..core.exceptions import AdapterError
from ..core.logging import adapter_logger
from ..core.models import RelationshipFact, TrustSignal

logger = logging.getLogger(__name__)

ADAPTER_NAME = "indexer"
TERM_ID_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
BASE_UNITS = Decimal(10) ** 18
RELATIONSHIP_LIMIT = 50

ATOM_BY_ID_QUERY = """
query AtomById($id: String!) {
  atoms(where: { id: { _eq: $id } }, limit: 1) {
    id
    label
  }
}
"""

ATOM_BY_LABEL_QUERY = """
query AtomByLabel($label: String!) {
  atoms(where: { label: { _eq: $label } }, limit: 1) {
    id
    label
  }
}
"""

IDENTITY_CLAIM_QUERY = """
query IdentityClaim($subject: String!, $predicate: String!, $object: String!) {
  triples(
    where: {
      subject: { id: { _eq: $subject } }
      predicate: { label: { _eq: $predicate } }
      object: { label: { _eq: $object } }
    }
    limit: 1
  ) {
    id
    vault { total_shares position_count }
    counter_vault { total_shares position_count }
  }
}
"""

RELATIONSHIPS_QUERY = """
query Relationships($subject: String!, $limit: Int!) {
  triples(
    where: { subject: { id: { _eq: $subject } } }
    order_by: { vault: { total_shares: desc_nulls_last } }
    limit: $limit
  ) {
    id
    subject { id label }
    predicate { id label }
    object { id label }
    vault { total_shares position_count }
  }
}
"""


# =============================================================================
# Response Models
# =============================================================================


class AtomNode(BaseModel):
    id: str
    label: str | None = None


class VaultNode(BaseModel):
    total_shares: str | int | None = None
    position_count: int | None = None


class TripleNode(BaseModel):
    id: str
    subject: AtomNode | None = None
    predicate: AtomNode | None = None
    object: AtomNode | None = None
    vault: VaultNode | None = None
    counter_vault: VaultNode | None = None


class AtomsResult(BaseModel):
    atoms: list[AtomNode]


class TriplesResult(BaseModel):
    triples: list[TripleNode]


def is_term_id(identity_key: str) -> bool:
    """True when the key is a ``0x``-prefixed 32-byte term id rather than a label."""
    return bool(TERM_ID_RE.match(identity_key))


def from_base_units(vault: VaultNode | None) -> float:
    """Convert an 18-decimal vault amount to whole tokens (0 when absent)."""
    if vault is None or vault.total_shares is None:
        return 0.0
    try:
        return float(Decimal(str(vault.total_shares)) / BASE_UNITS)
    except InvalidOperation as e:
        raise AdapterError(ADAPTER_NAME, f"malformed vault amount: {vault.total_shares!r}") from e


def _label(node: AtomNode | None) -> str:
    if node is None:
        return "?"
    return node.label or node.id


class IndexerSignalReader:
    """SignalReader backed by the GraphQL indexer."""

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
        identity_predicate: str | None = None,
        identity_object: str | None = None,
    ):
        config = get_config()
        self.endpoint = endpoint if endpoint is not None else config.graphql_endpoint
        self.timeout = timeout if timeout is not None else config.request_timeout
        self.identity_predicate = identity_predicate or config.identity_predicate
        self.identity_object = identity_object or config.identity_object
        self._client = client

    def _post(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Execute a GraphQL query and return its ``data`` payload."""
        body = {"query": query, "variables": variables}
        try:
            if self._client is not None:
                resp = self._client.post(self.endpoint, json=body, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    resp = client.post(self.endpoint, json=body)
        except httpx.TimeoutException as e:
            raise AdapterError(ADAPTER_NAME, f"request to {self.endpoint} timed out") from e
        except httpx.HTTPError as e:
            raise AdapterError(ADAPTER_NAME, f"request to {self.endpoint} failed: {e}") from e

        if resp.status_code >= 400:
            raise AdapterError(ADAPTER_NAME, f"GraphQL request failed: HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except json.JSONDecodeError as e:
            raise AdapterError(ADAPTER_NAME, "GraphQL response is not JSON") from e

        if not isinstance(payload, dict):
            raise AdapterError(ADAPTER_NAME, "GraphQL response is not an object")
        if payload.get("errors"):
            messages = ", ".join(str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in payload["errors"])
            raise AdapterError(ADAPTER_NAME, f"GraphQL errors: {messages}")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise AdapterError(ADAPTER_NAME, "GraphQL response has no data")
        return data

    def _query(self, query: str, variables: dict[str, Any], model: type[BaseModel]) -> Any:
        data = self._post(query, variables)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise AdapterError(ADAPTER_NAME, f"unexpected GraphQL response shape: {e.error_count()} errors") from e

    def resolve_atom(self, identity_key: str) -> AtomNode | None:
        """Look up the identity atom by term id or label."""
        if is_term_id(identity_key):
            result = self._query(ATOM_BY_ID_QUERY, {"id": identity_key.lower()}, AtomsResult)
        else:
            result = self._query(ATOM_BY_LABEL_QUERY, {"label": identity_key}, AtomsResult)
        return result.atoms[0] if result.atoms else None

    def read_identity_signal(self, identity_key: str) -> TrustSignal:
        """Resolve identity, claim, stake and relationship facts.

        Raises:
            AdapterError: On transport failure, GraphQL errors or malformed responses.
        """
        adapter_logger.log_call(ADAPTER_NAME, "read_identity_signal", {"identity_key": identity_key, "endpoint": self.endpoint})
        started = time.monotonic()
        try:
            signal = self._read(identity_key)
        except AdapterError as e:
            logger.warning(f"Signal read failed for {identity_key}: {e.message}")
            adapter_logger.log_result(ADAPTER_NAME, "read_identity_signal", False, duration_ms=(time.monotonic() - started) * 1000)
            raise
        adapter_logger.log_result(ADAPTER_NAME, "read_identity_signal", True, duration_ms=(time.monotonic() - started) * 1000)
        return signal

    def _read(self, identity_key: str) -> TrustSignal:
        atom = self.resolve_atom(identity_key)
        if atom is None:
            return TrustSignal(identity_exists=False)

        claims = self._query(
            IDENTITY_CLAIM_QUERY,
            {"subject": atom.id, "predicate": self.identity_predicate, "object": self.identity_object},
            TriplesResult,
        )
        claim = claims.triples[0] if claims.triples else None

        related = self._query(RELATIONSHIPS_QUERY, {"subject": atom.id, "limit": RELATIONSHIP_LIMIT}, TriplesResult)
        relationships = tuple(
            RelationshipFact(
                subject=_label(t.subject),
                predicate=_label(t.predicate),
                object=_label(t.object),
                triple_id=t.id,
                stake=from_base_units(t.vault),
            )
            for t in related.triples
            if claim is None or t.id != claim.id
        )

        if claim is None:
            return TrustSignal(identity_exists=True, claim_exists=False, relationship_claims=relationships)

        return TrustSignal(
            identity_exists=True,
            claim_exists=True,
            for_stake=from_base_units(claim.vault),
            against_stake=from_base_units(claim.counter_vault),
            relationship_claims=relationships,
        )
