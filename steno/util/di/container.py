"""Dependency injection container."""

from dishka import AsyncContainer, Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from steno.util.di import PROVIDERS, get_provider


def create_container(*extra: Provider) -> AsyncContainer:
    """Build the production container.

    Every mockable component resolves to its production implementation, so
    startup fails fast when e.g. ENCRYPTION__MASTER_KEY is missing and the
    KMS client is first requested.

    Args:
        extra: Additional providers layered on top

    Returns:
        Container wired for FastAPI request scopes
    """
    provider_instances = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(*provider_instances, FastapiProvider(), *extra)


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container so routes can resolve ``FromDishka`` dependencies."""
    setup_dishka(container, app)
