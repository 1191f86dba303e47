# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Trustprint Contributors

"""Presentation and adapter overrides for the ``trustprint`` command.

Sources, later ones winning: built-in defaults, ``~/.trustprint/cli.toml``,
``TRUSTPRINT_OUTPUT``, command-line flags. Example file::

    output = "json"
    graphql_endpoint = "http://localhost:8080/v1/graphql"
    intercom_dir = "~/agents/intercom"
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..core.exceptions import ConfigException

_DEFAULT_CONFIG_PATH = Path.home() / ".trustprint" / "cli.toml"
_OUTPUT_FORMATS = ("text", "json")


@dataclass
class CLIConfig:
    """Settings that only matter to the CLI.

    ``graphql_endpoint`` and ``intercom_dir`` stay None unless set here;
    the adapters then use the core settings.
    """

    output: str = "text"
    graphql_endpoint: str | None = None
    intercom_dir: str | None = None

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        output: str | None = None,
        graphql_endpoint: str | None = None,
        intercom_dir: str | None = None,
    ) -> CLIConfig:
        """Layer file, environment and flag values over the defaults.

        Raises:
            ConfigException: If the config file exists but cannot be parsed.
        """
        config = cls()
        path = config_path or _DEFAULT_CONFIG_PATH
        if path.exists():
            config._apply(_read_toml(path))

        env_output = os.environ.get("TRUSTPRINT_OUTPUT", "")
        config._apply({"output": env_output} if env_output else {})

        config._apply({"output": output, "graphql_endpoint": graphql_endpoint, "intercom_dir": intercom_dir})
        return config

    def _apply(self, values: dict[str, Any]) -> None:
        # Unknown output formats are ignored rather than rejected
        output = values.get("output")
        if output in _OUTPUT_FORMATS:
            self.output = output
        for key in ("graphql_endpoint", "intercom_dir"):
            if values.get(key) is not None:
                setattr(self, key, str(values[key]))


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigException(f"Invalid CLI config {path}: {e}") from e


_cli_config: CLIConfig | None = None


def get_cli_config() -> CLIConfig:
    """Return the active CLI config, loading it on first use."""
    global _cli_config
    if _cli_config is None:
        _cli_config = CLIConfig.load()
    return _cli_config


def set_cli_config(config: CLIConfig) -> None:
    global _cli_config
    _cli_config = config


def reset_cli_config() -> None:
    global _cli_config
    _cli_config = None
