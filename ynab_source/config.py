"""YAML configuration loader for ynab-source.

Reads the connection file from the config directory:
  connection.yaml

Layout follows the Evidence source convention:

    name: ynab
    type: ynab
    options:
      accessToken: <personal access token>
      baseUrl: https://api.ynab.com/v1   # optional

Environment variables take precedence over the file:
  YNAB_ACCESS_TOKEN, YNAB_BASE_URL
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from ynab_source.api.client import API_BASE_URL

CONNECTION_FILE = "connection.yaml"


class Config:
    """Loads connection options from YAML with environment overrides.

    Args:
        config_dir: Directory holding connection.yaml. None means
            environment-only configuration.
        environ: Mapping used for overrides (defaults to os.environ).
    """

    def __init__(
        self,
        config_dir: Path | str | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.config_dir = Path(config_dir) if config_dir is not None else None
        if self.config_dir is not None and not self.config_dir.is_dir():
            raise FileNotFoundError(f"Config directory not found: {self.config_dir}")
        self.environ = os.environ if environ is None else environ

        self._connection: dict | None = None

    def _load(self, filename: str) -> dict:
        path = self.config_dir / filename
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if data is None:
            raise ValueError(f"Empty config file: {path}")
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {path}")
        return data

    @property
    def connection(self) -> dict:
        """Raw connection.yaml contents, or {} when there is no file."""
        if self._connection is None:
            if self.config_dir is None or not (self.config_dir / CONNECTION_FILE).exists():
                self._connection = {}
            else:
                self._connection = self._load(CONNECTION_FILE)
        return self._connection

    @property
    def options(self) -> dict:
        options = self.connection.get("options") or {}
        if not isinstance(options, dict):
            raise ValueError(f"'options' in {CONNECTION_FILE} must be a mapping")
        return options

    @property
    def access_token(self) -> str:
        token = self.environ.get("YNAB_ACCESS_TOKEN") or self.options.get("accessToken")
        if not token:
            raise ValueError(
                "No YNAB access token configured: set YNAB_ACCESS_TOKEN or "
                f"options.accessToken in {CONNECTION_FILE}. Tokens can be "
                "generated at https://app.ynab.com/settings/developer"
            )
        return str(token)

    @property
    def base_url(self) -> str:
        return (
            self.environ.get("YNAB_BASE_URL")
            or self.options.get("baseUrl")
            or API_BASE_URL
        )
