# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Trustprint Contributors

"""Trustprint - trust fingerprints for agent-to-agent exchanges.

Two independent pipelines:
  Messages (sender, recipient, time, length only)
    -> Rhythm (latency, gaps, length variance, time-of-day consistency)
    -> Commitment (commitment, rhythm signature, exchange hash)

  Protocol signals (identity atom, identity claim, for/against stake)
    -> Trust verdict (trusted + reason, stake, sentiment, contested)

Both parties to an exchange compute the commitment locally and compare only
the hashes: the pattern is visible, the content stays private.

CLI entry point: ``trustprint``
"""

__version__ = "0.3.0"

from . import (
    core as core,
)
