"""
Initializes the Dynaconf settings object for koios_client.
This module is the single source of truth for all configuration.

Values come from the packaged ``config/settings.toml``, an optional
``config/.secrets.toml`` next to it (for ``client.auth_token``) and
``KOIOS_`` environment variables, e.g. ``KOIOS_CLIENT__RATE_LIMIT=10``.
"""

from pathlib import Path
from dynaconf import Dynaconf

PACKAGE_ROOT = Path(__file__).parent

settings = Dynaconf(
    root_path=PACKAGE_ROOT,
    settings_files=["config/settings.toml"],
    secrets=["config/.secrets.toml"],
    envvar_prefix="KOIOS",
    merge_enabled=True,
)
