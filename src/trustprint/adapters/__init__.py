"""Concrete adapters for the core's MessageStore and SignalReader protocols."""

from __future__ import annotations

from .indexer import IndexerSignalReader
from .intercom import IntercomMessageStore

__all__ = ["IndexerSignalReader", "IntercomMessageStore"]
