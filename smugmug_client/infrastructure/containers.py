"""
Dependency Injection container for the SmugMug client.

This container uses the `dependency-injector` library to load the Dynaconf
settings and wire the shared httpx client and the API service from them.
"""

from pathlib import Path

from dependency_injector import containers, providers
from dynaconf import Dynaconf
import httpx

from .api_client import SmugMugService

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Container(containers.DeclarativeContainer):
    """DI container for wiring the client components."""

    # Values can be overridden with SMUGMUG_<SECTION>__<KEY> variables.
    config = providers.Singleton(
        Dynaconf,
        root_path=str(PROJECT_ROOT),
        settings_files=["config/settings.toml", "config/.secrets.toml"],
        envvar_prefix="SMUGMUG",
        merge_enabled=True,
        load_dotenv=False,
        environments=False,
    )

    http_client = providers.Singleton(
        httpx.Client,
        timeout=config.provided.smugmug.timeout,
    )

    smugmug_service = providers.Factory(
        SmugMugService,
        client=http_client,
        base_url=config.provided.smugmug.base_url,
        user_agent=config.provided.smugmug.user_agent,
        api_key=config.provided.smugmug.api_key,
        debug=config.provided.smugmug.debug,
    )
