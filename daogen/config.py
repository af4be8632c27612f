# File: daogen/config.py
"""
daogen - Configuration Loading
===============================

Builds a ``GeneratorConfig`` from a settings file plus explicit overrides
(the CLI flags).  Two file formats are understood:

YAML / JSON mapping (``.yaml``, ``.yml``, ``.json``, anything else)::

    database:
      url: mysql+pymysql://localhost/shop
      username: app
      password: secret
    output_dir: src/main/java
    model_package: com.shop.model
    dao_package: com.shop.dao
    exclude_tables: [flyway_schema_history]

Java ``.properties`` (the same file the generated DAOs read)::

    db.url=mysql+pymysql://localhost/shop
    db.username=app
    db.password=secret
    generator.output_dir=src/main/java
    generator.exclude_tables=flyway_schema_history, audit_log

Every problem (unreadable file, bad syntax, missing URL, invalid value) is
raised as ``ConfigurationError``.
"""

from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

import yaml
from pydantic import ValidationError

from daogen.errors import ConfigurationError
from daogen.models import GeneratorConfig

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.config")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PROPERTIES_SUFFIXES: FrozenSet[str] = frozenset({".properties"})

# Connection keys shared with the generated DAOs' database.properties.
_CONNECTION_KEYS: Dict[str, str] = {
    "db.url": "database_url",
    "db.username": "username",
    "db.user": "username",
    "db.password": "password",
}

_GENERATOR_PREFIX: str = "generator."

_LIST_FIELDS: FrozenSet[str] = frozenset({"tables", "exclude_tables"})

_TEXT_FIELDS: FrozenSet[str] = frozenset({"database_url", "username", "password"})

_FAKE_SECTION: str = "properties"


# ---------------------------------------------------------------------------
# File readers
# ---------------------------------------------------------------------------


def _split_list(value: Any) -> Any:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


def _field_name(key: str) -> str:
    return key.strip().replace("-", "_").replace(".", "_").lower()


def _read_properties(path: Path) -> Dict[str, Any]:
    parser: configparser.ConfigParser = configparser.ConfigParser(
        interpolation=None,
        delimiters=("=", ":"),
        comment_prefixes=("#", "!"),
        strict=False,
    )
    parser.optionxform = str  # type: ignore[assignment]

    try:
        text: str = path.read_text(encoding="utf-8")
        parser.read_string(f"[{_FAKE_SECTION}]\n{text}", source=str(path))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc
    except configparser.Error as exc:
        raise ConfigurationError(f"Invalid properties file {path}: {exc}") from exc

    data: Dict[str, Any] = {}
    for key, value in parser.items(_FAKE_SECTION):
        if key in _CONNECTION_KEYS:
            data[_CONNECTION_KEYS[key]] = value
        elif key.startswith(_GENERATOR_PREFIX):
            data[_field_name(key[len(_GENERATOR_PREFIX):])] = value
        else:
            logger.debug("Ignoring property '%s' in %s.", key, path)
    return data


def _read_mapping(path: Path) -> Dict[str, Any]:
    try:
        text: str = path.read_text(encoding="utf-8")
        raw: Any = yaml.safe_load(text)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Expected a mapping at top level of {path}, got {type(raw).__name__}."
        )

    data: Dict[str, Any] = {}
    for key, value in raw.items():
        key = str(key)
        if key == "database" and isinstance(value, dict):
            for sub_key, sub_value in value.items():
                target: str = {"url": "database_url", "user": "username"}.get(
                    str(sub_key), _field_name(str(sub_key))
                )
                data[target] = sub_value
        elif key in _CONNECTION_KEYS:
            data[_CONNECTION_KEYS[key]] = value
        else:
            data[_field_name(key)] = value
    return data


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read a settings file into a flat dict keyed by ``GeneratorConfig`` field.

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed.
    """
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")
    if not path.is_file():
        raise ConfigurationError(f"Configuration path is not a file: {path}")

    if path.suffix.lower() in PROPERTIES_SUFFIXES:
        data: Dict[str, Any] = _read_properties(path)
    else:
        data = _read_mapping(path)

    logger.info("Loaded configuration file %s (%d setting(s)).", path, len(data))
    return data


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> GeneratorConfig:
    """
    Build the run configuration.

    Args:
        path: Optional settings file (YAML/JSON or ``.properties``).
        overrides: Field values that win over the file; ``None`` values are
            ignored so unset CLI flags do not clear file settings.

    Raises:
        ConfigurationError: On any missing or invalid setting.
    """
    data: Dict[str, Any] = read_config_file(Path(path)) if path is not None else {}

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    for list_field in _LIST_FIELDS:
        if list_field in data:
            data[list_field] = _split_list(data[list_field])

    # YAML turns ``password: 1234`` into an int.
    for text_field in _TEXT_FIELDS:
        value = data.get(text_field)
        if value is not None and not isinstance(value, str):
            data[text_field] = str(value)

    url: Any = data.get("database_url")
    if url is None or not str(url).strip():
        raise ConfigurationError(
            "No database URL configured. Set db.url / database.url in the "
            "configuration file or pass --url."
        )

    try:
        config: GeneratorConfig = GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        problems: List[str] = [
            f"{'.'.join(str(part) for part in err['loc']) or '(root)'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ConfigurationError(
            "Invalid configuration: " + "; ".join(problems)
        ) from exc

    logger.debug(
        "Configuration ready: output=%s, model=%s, dao=%s.",
        config.output_dir,
        config.model_package,
        config.dao_package,
    )
    return config


__all__: List[str] = [
    "read_config_file",
    "load_config",
]
