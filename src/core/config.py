"""Runtime configuration model for the Healthisis ETL.

This module owns all environment variable and YAML config parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from core.constants import (
    CATEGORY_FILE_NAME,
    DEFAULT_CLICKHOUSE_DATABASE,
    DEFAULT_CLICKHOUSE_HOST,
    DEFAULT_CLICKHOUSE_PORT,
    DEFAULT_CLICKHOUSE_TABLE,
    DEFAULT_CLICKHOUSE_USERNAME,
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_DATA_DIR,
    DEFAULT_MAX_EXECUTION_TIME_SECONDS,
    DEFAULT_SEND_RECEIVE_TIMEOUT_SECONDS,
    DISEASE_FILE_NAME,
)
from core.errors import HealthisisConfigError


@dataclass(frozen=True)
class ClickHouseSettings:
    """Connection parameters for the target ClickHouse store.

    Attributes:
        host: Server host name.
        port: HTTP interface port.
        database: Target database, created when missing.
        username: Login user.
        password: Login password.
        table: Target table name inside ``database``.
        connect_timeout: Connection timeout in seconds.
        send_receive_timeout: Socket read/write timeout in seconds.
        max_execution_time: Server-side query time limit in seconds.
    """

    host: str = DEFAULT_CLICKHOUSE_HOST
    port: int = DEFAULT_CLICKHOUSE_PORT
    database: str = DEFAULT_CLICKHOUSE_DATABASE
    username: str = DEFAULT_CLICKHOUSE_USERNAME
    password: str = ""
    table: str = DEFAULT_CLICKHOUSE_TABLE
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT_SECONDS
    send_receive_timeout: int = DEFAULT_SEND_RECEIVE_TIMEOUT_SECONDS
    max_execution_time: int = DEFAULT_MAX_EXECUTION_TIME_SECONDS


@dataclass(frozen=True)
class PipelineConfig:
    """Validated runtime configuration.

    Attributes:
        data_dir: Directory holding the source CSV files.
        clickhouse: Target store connection settings.
        disease_file_name: Wide quarterly disease CSV file name.
        category_file_name: Category prevalence/incidence CSV file name.
    """

    data_dir: Path
    clickhouse: ClickHouseSettings = field(default_factory=ClickHouseSettings)
    disease_file_name: str = DISEASE_FILE_NAME
    category_file_name: str = CATEGORY_FILE_NAME

    @property
    def disease_file_path(self) -> Path:
        """Return the full path of the quarterly disease CSV."""
        return self.data_dir / self.disease_file_name

    @property
    def category_file_path(self) -> Path:
        """Return the full path of the category aggregate CSV."""
        return self.data_dir / self.category_file_name

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            HealthisisConfigError: If environment values are invalid.
        """
        data_dir_value = os.getenv("HEALTHISIS_DATA_DIR", str(DEFAULT_DATA_DIR))
        config = cls(data_dir=Path(data_dir_value).expanduser().resolve())
        return _apply_env_overrides(config)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "PipelineConfig":
        """Build config from a service YAML file plus env overrides.

        Only the ``database.clickhouse`` section and an optional top-level
        ``data_dir`` key are read; other service sections are ignored.

        Args:
            config_path: Path to the YAML config file.

        Returns:
            A validated config object.

        Raises:
            HealthisisConfigError: If the file is unreadable or malformed.
        """
        payload = _read_yaml_file(config_path)
        clickhouse_section = _mapping_at(payload, ("database", "clickhouse"), config_path)
        settings = _settings_from_mapping(clickhouse_section, config_path)
        default_data_dir = os.getenv("HEALTHISIS_DATA_DIR", str(DEFAULT_DATA_DIR))
        data_dir_value = str(payload.get("data_dir", default_data_dir))
        config = cls(
            data_dir=Path(data_dir_value).expanduser().resolve(),
            clickhouse=settings,
        )
        return _apply_env_overrides(config)


def _apply_env_overrides(config: PipelineConfig) -> PipelineConfig:
    """Apply CLICKHOUSE_* environment overrides to a config."""
    settings = config.clickhouse
    overrides: dict[str, Any] = {}
    host = os.getenv("CLICKHOUSE_HOST")
    if host:
        overrides["host"] = host
    port = os.getenv("CLICKHOUSE_PORT")
    if port:
        overrides["port"] = _parse_int("CLICKHOUSE_PORT", port)
    database = os.getenv("CLICKHOUSE_DB")
    if database:
        overrides["database"] = database
    username = os.getenv("CLICKHOUSE_USER")
    if username:
        overrides["username"] = username
    password = os.getenv("CLICKHOUSE_PASSWORD")
    if password:
        overrides["password"] = password
    if not overrides:
        return config
    return replace(config, clickhouse=replace(settings, **overrides))


def _read_yaml_file(config_path: Path) -> Mapping[str, Any]:
    """Read a YAML config file into a mapping.

    Raises:
        HealthisisConfigError: If the file is missing or not a mapping.
    """
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as error:
        raise HealthisisConfigError(
            f"Failed to read config file {config_path}: {error}. "
            "Pass an existing YAML file with --config."
        ) from error
    try:
        payload = yaml.safe_load(raw_text)
    except yaml.YAMLError as error:
        raise HealthisisConfigError(
            f"Failed to parse config file {config_path}: {error}. Fix the YAML syntax."
        ) from error
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise HealthisisConfigError(
            f"Invalid config file {config_path}: expected a mapping at top level."
        )
    return payload


def _mapping_at(
    payload: Mapping[str, Any],
    keys: tuple[str, ...],
    config_path: Path,
) -> Mapping[str, Any]:
    """Return a nested mapping, or an empty one when keys are absent."""
    current: Any = payload
    for key in keys:
        if not isinstance(current, dict):
            raise HealthisisConfigError(
                f"Invalid config file {config_path}: section '{key}' must be a mapping."
            )
        current = current.get(key, {})
    if current is None:
        return {}
    if not isinstance(current, dict):
        raise HealthisisConfigError(
            f"Invalid config file {config_path}: section '{'.'.join(keys)}' must be a mapping."
        )
    return current


def _settings_from_mapping(section: Mapping[str, Any], config_path: Path) -> ClickHouseSettings:
    """Build ClickHouse settings from a YAML section, keeping defaults."""
    defaults = ClickHouseSettings()
    return ClickHouseSettings(
        host=str(section.get("host", defaults.host)),
        port=_parse_int(f"{config_path}:port", section.get("port", defaults.port)),
        database=str(section.get("database", defaults.database)),
        username=str(section.get("username", defaults.username)),
        password=str(section.get("password") or defaults.password),
        table=str(section.get("table", defaults.table)),
        connect_timeout=_parse_int(
            f"{config_path}:dial_timeout",
            section.get("dial_timeout", defaults.connect_timeout),
        ),
        send_receive_timeout=_parse_int(
            f"{config_path}:send_receive_timeout",
            section.get("send_receive_timeout", defaults.send_receive_timeout),
        ),
        max_execution_time=_parse_int(
            f"{config_path}:max_execution_time",
            section.get("max_execution_time", defaults.max_execution_time),
        ),
    )


def _parse_int(source_name: str, raw_value: object) -> int:
    """Parse an integer configuration value.

    Args:
        source_name: Env variable or config key the value came from.
        raw_value: Raw value to parse.

    Returns:
        Parsed integer.

    Raises:
        HealthisisConfigError: If value cannot be parsed into int.
    """
    try:
        return int(str(raw_value))
    except ValueError as error:
        raise HealthisisConfigError(
            f"Invalid {source_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {source_name} to a numeric value."
        ) from error
