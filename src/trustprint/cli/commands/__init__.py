"""CLI command modules for Trustprint.

Each module exposes a ``register(subparsers)`` function that wires up
its argparse sub-commands and sets ``parser.set_defaults(func=handler)``.
"""

from . import exchange, report, trust
from .exchange import cmd_attest, cmd_compare, cmd_hash
from .report import cmd_report
from .trust import cmd_verify

# All command modules with register() functions, in registration order.
COMMAND_MODULES = [
    exchange,
    trust,
    report,
]

__all__ = [
    "COMMAND_MODULES",
    "cmd_attest",
    "cmd_compare",
    "cmd_hash",
    "cmd_report",
    "cmd_verify",
]
