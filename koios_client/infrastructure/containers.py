"""
Dependency Injection container for koios_client.

This container uses the `dependency-injector` library to wire the settings,
the shared API client and the query service used by the command line.
"""

from dependency_injector import containers, providers

from ..application.service import QueryService
from ..settings import settings

from .api_client import KoiosClient


class Container(containers.DeclarativeContainer):
    """DI container for wiring the application components."""

    cli_args = providers.Configuration()

    config = providers.Object(settings)

    client = providers.Singleton(
        KoiosClient.from_settings,
        settings=config,
        overrides=cli_args.client,
    )

    query_service = providers.Factory(
        QueryService,
        client=client,
    )
