"""
Credential and endpoint helpers.

Builds pipeline URLs and authorization values, and reads credentials from
environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from .exceptions import ConfigurationError

ENV_PIPELINE_URL = "BUNNYDB_PIPELINE_URL"
ENV_TOKEN = "BUNNYDB_TOKEN"
ENV_DB_ID = "BUNNYDB_ID"

PIPELINE_PATH = "/v2/pipeline"


def db_id_to_pipeline_url(db_id: str) -> str:
    """
    Format a database ID into its pipeline URL.

    Example: ``"abc123"`` -> ``"https://abc123.lite.bunnydb.net/v2/pipeline"``
    """
    return f"https://{db_id.strip()}.lite.bunnydb.net{PIPELINE_PATH}"


def to_pipeline_url(url: str) -> str:
    """
    Turn a database URL into its pipeline endpoint.

    ``libsql://`` URLs are rewritten to ``https://``; URLs that already end
    with the pipeline path are kept as is.
    """
    trimmed = url.strip().rstrip("/")
    if trimmed.endswith(PIPELINE_PATH):
        return trimmed
    if trimmed.startswith("libsql://"):
        return f"https://{trimmed[len('libsql://'):]}{PIPELINE_PATH}"
    return f"{trimmed}{PIPELINE_PATH}"


def normalize_bearer_authorization(token: str) -> str:
    """Prefix a token with ``Bearer `` unless it already has it (any case)."""
    trimmed = token.strip()
    if trimmed[:7].lower() == "bearer ":
        return trimmed
    return f"Bearer {trimmed}"


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if value is None:
        raise ConfigurationError(f"missing {name} environment variable")
    if not value.strip():
        raise ConfigurationError(f"{name} is set but empty")
    return value


def load_env_credentials(environ: Mapping[str, str] | None = None) -> tuple[str, str]:
    """
    Read the pipeline URL and token from the environment.

    Returns:
        (pipeline_url, token)

    Raises:
        ConfigurationError: If either variable is missing or blank
    """
    env = os.environ if environ is None else environ
    return _require(env, ENV_PIPELINE_URL), _require(env, ENV_TOKEN)


def load_env_db_id_credentials(environ: Mapping[str, str] | None = None) -> tuple[str, str]:
    """
    Read the database ID and token from the environment.

    Returns:
        (db_id, token)

    Raises:
        ConfigurationError: If either variable is missing or blank
    """
    env = os.environ if environ is None else environ
    return _require(env, ENV_DB_ID), _require(env, ENV_TOKEN)


__all__ = [
    "ENV_DB_ID",
    "ENV_PIPELINE_URL",
    "ENV_TOKEN",
    "db_id_to_pipeline_url",
    "load_env_credentials",
    "load_env_db_id_credentials",
    "normalize_bearer_authorization",
    "to_pipeline_url",
]
