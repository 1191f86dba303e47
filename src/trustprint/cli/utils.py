"""Utility functions for the Trustprint CLI."""

from __future__ import annotations

import argparse
from datetime import datetime

from ..adapters import IndexerSignalReader, IntercomMessageStore
from ..core.config import get_config
from ..core.exceptions import ValidationException
from ..core.models import TrustThreshold, to_utc
from .config import get_cli_config


def parse_agents(value: str) -> tuple[str, str]:
    """Parse ``a,b`` into a lower-cased participant pair.

    Raises:
        ValidationException: Unless exactly two names are given.
    """
    names = [name.strip().lower() for name in value.split(",") if name.strip()]
    if len(names) != 2:
        raise ValidationException("Need exactly 2 agents, e.g. --agents axiom,veritas", field="agents", value=value)
    return names[0], names[1]


def parse_since(value: str | None) -> datetime | None:
    """Parse an ISO-8601 date or datetime; naive values are UTC."""
    if value is None:
        return None
    try:
        return to_utc(datetime.fromisoformat(value))
    except ValueError as e:
        raise ValidationException(f"Invalid --since value: {value}", field="since", value=value) from e


def build_message_store(args: argparse.Namespace) -> IntercomMessageStore:
    """Intercom store from --dir, CLI config, or core settings, in that order."""
    directory = getattr(args, "dir", None) or get_cli_config().intercom_dir or get_config().intercom_path
    return IntercomMessageStore(directory)


def build_signal_reader(args: argparse.Namespace) -> IndexerSignalReader:
    """Indexer reader from --endpoint, CLI config, or core settings, in that order."""
    endpoint = getattr(args, "endpoint", None) or get_cli_config().graphql_endpoint
    return IndexerSignalReader(endpoint=endpoint)


def build_threshold(args: argparse.Namespace) -> TrustThreshold:
    """Threshold from --min-stake / --min-sentiment over the configured defaults."""
    default = get_config().default_threshold
    min_stake = getattr(args, "min_stake", None)
    min_sentiment = getattr(args, "min_sentiment", None)
    return TrustThreshold(
        min_stake=default.min_stake if min_stake is None else min_stake,
        min_sentiment=default.min_sentiment if min_sentiment is None else min_sentiment,
    )
