"""Bootstrap the message bus and query facade on top of a key-value store."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from sqlalchemy.exc import ArgumentError, NoSuchModuleError

from pvtrack import config
from pvtrack.adapters.clock import SystemClock
from pvtrack.adapters.db.engine import make_engine
from pvtrack.adapters.kv_store import (
    LocalKeyValueStore,
    MemoryKeyValueStore,
    SqlAlchemyKeyValueStore,
)
from pvtrack.interfaces.clock import Clock
from pvtrack.interfaces.kv_store import KeyValueStore
from pvtrack.service_layer.activity_log import ActivityLog
from pvtrack.service_layer.checklist_store import ChecklistStore
from pvtrack.service_layer.commands import Command
from pvtrack.service_layer.global_rollup import GlobalRollupService
from pvtrack.service_layer.handlers import COMMAND_HANDLERS
from pvtrack.service_layer.messagebus import MessageBus
from pvtrack.service_layer.queries import QueryFacade
from pvtrack.service_layer.unit_aggregator import UnitAggregator

logger = logging.getLogger(__name__)

MEMORY_SCHEME = "memory://"
FILE_SCHEME = "file://"


class UnsupportedStoreUrlError(ValueError):
    """Raised when a store URL does not name a usable backend."""


@dataclass(frozen=True)
class TrackerServices:
    """The service-layer components built on one store."""

    checklists: ChecklistStore
    units: UnitAggregator
    rollups: GlobalRollupService
    activity: ActivityLog


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring constants."""

    message_bus: MessageBus
    queries: QueryFacade
    settings: config.TrackerSettings
    store: KeyValueStore


def build_store(url: str) -> KeyValueStore:
    """Build the key-value store a URL names.

    - ``memory://`` → in-memory store (lost on exit)
    - ``file:///some/dir`` → one file per key under ``/some/dir``
    - anything else → a SQLAlchemy database URL

    Raises:
        UnsupportedStoreUrlError: If the URL is not usable.
    """
    if url == MEMORY_SCHEME:
        return MemoryKeyValueStore()
    if url.startswith(FILE_SCHEME):
        if not (path := url.removeprefix(FILE_SCHEME)):
            raise UnsupportedStoreUrlError(f"No directory in store URL {url!r}")
        return LocalKeyValueStore(Path(path))
    try:
        engine = make_engine(url)
    except (ArgumentError, NoSuchModuleError) as e:
        raise UnsupportedStoreUrlError(f"Not a usable store URL: {url!r}") from e
    store = SqlAlchemyKeyValueStore(engine)
    store.create_schema()
    return store


def build_services(
    store: KeyValueStore, settings: config.TrackerSettings, clock: Clock
) -> TrackerServices:
    """Build the service-layer components on ``store``."""
    units = UnitAggregator(store, clock)
    return TrackerServices(
        checklists=ChecklistStore(store, settings.template),
        units=units,
        rollups=GlobalRollupService(store, units, settings.total_units),
        activity=ActivityLog(store, settings.activity_limit),
    )


def build_message_bus(
    services: TrackerServices,
    command_handlers: Mapping[type[Command], Callable[..., object]],
) -> MessageBus:
    """Build a message bus with injected dependencies."""
    dependencies = {
        "checklists": services.checklists,
        "units": services.units,
        "rollups": services.rollups,
        "activity": services.activity,
    }
    injected_command_handlers = {
        command_type: inject_dependencies(handler, dependencies)
        for command_type, handler in command_handlers.items()
    }
    return MessageBus(command_handlers=injected_command_handlers)


def bootstrap(
    store: KeyValueStore | None = None,
    settings: config.TrackerSettings | None = None,
    clock: Clock | None = None,
) -> AppContainer:
    """Bootstrap the message bus and query facade.

    Args:
        store: Store to use; defaults to the one `PVTRACK_STORE_URL` names.
        settings: Tracker settings; defaults to `config.load_settings()`.
        clock: Clock; defaults to the system clock.
    """
    settings = settings or config.load_settings()
    if store is None:
        store = build_store(config.get_store_url())
    services = build_services(store, settings, clock or SystemClock())
    logger.debug(
        "Bootstrapped %s with %d units of %d tests",
        type(store).__name__,
        settings.total_units,
        settings.tests_per_unit,
    )
    return AppContainer(
        message_bus=build_message_bus(services, COMMAND_HANDLERS),
        queries=QueryFacade(
            services.checklists, services.units, services.rollups, services.activity
        ),
        settings=settings,
        store=store,
    )


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> Callable:
    """Inject dependencies into a handler function based on its parameters."""
    params = inspect.signature(handler).parameters
    deps = {
        name: dependency for name, dependency in dependencies.items() if name in params
    }
    return partial(handler, **deps)
