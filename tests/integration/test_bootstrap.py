"""Test the bootstrap function and store URL resolution."""

import pytest

from pvtrack.adapters.kv_store import (
    LocalKeyValueStore,
    MemoryKeyValueStore,
    SqlAlchemyKeyValueStore,
)
from pvtrack.bootstrap import (
    AppContainer,
    UnsupportedStoreUrlError,
    bootstrap,
    build_store,
)
from pvtrack.bootstrap.bootstrap import (
    build_message_bus,
    build_services,
    inject_dependencies,
)
from pvtrack.service_layer.commands import Command, ToggleTestStatus
from pvtrack.service_layer.messagebus import MessageBus, NoHandlerForCommand

# pylint: disable=too-few-public-methods
# pylint: disable=magic-value-comparison


class CustomCommand(Command):
    """A custom command for testing."""


class TestBuildStore:
    """Tests for `build_store`."""

    @staticmethod
    def test_memory_url():
        assert isinstance(build_store("memory://"), MemoryKeyValueStore)

    @staticmethod
    def test_file_url(tmp_path):
        store = build_store(f"file://{tmp_path / 'kv'}")
        assert isinstance(store, LocalKeyValueStore)
        assert store.root == tmp_path / "kv"
        assert (tmp_path / "kv").is_dir()

    @staticmethod
    def test_sqlite_url_creates_schema(sqlite_url):
        store = build_store(sqlite_url)
        assert isinstance(store, SqlAlchemyKeyValueStore)
        # build_store is safe to run against an existing database
        assert isinstance(build_store(sqlite_url), SqlAlchemyKeyValueStore)

    @staticmethod
    @pytest.mark.parametrize("url", ["file://", "not a url", "nosuchdb://x/y"])
    def test_unusable_urls(url):
        with pytest.raises(UnsupportedStoreUrlError):
            build_store(url)


class TestBootstrap:
    """Tests for the `bootstrap` function."""

    @staticmethod
    def test_bootstrap_returns_container(kv, settings, clock):
        app = bootstrap(store=kv, settings=settings, clock=clock)
        assert isinstance(app, AppContainer)
        assert isinstance(app.message_bus, MessageBus)
        assert app.store is kv
        assert app.settings is settings

    @staticmethod
    def test_bootstrap_reads_environment(monkeypatch):
        monkeypatch.setenv("PVTRACK_STORE_URL", "memory://")
        monkeypatch.setenv("PVTRACK_TOTAL_UNITS", "5")

        app = bootstrap()

        assert isinstance(app.store, MemoryKeyValueStore)
        assert app.settings.total_units == 5


async def test_bus_routes_registered_commands(app):
    checklist = await app.message_bus.handle(ToggleTestStatus("01", "test-1"))
    assert checklist.unit_id == "01"


async def test_bus_rejects_unknown_commands(app):
    with pytest.raises(NoHandlerForCommand):
        await app.message_bus.handle(CustomCommand())


# ============================================================================
#                           Dependency injection
# ============================================================================


async def test_only_requested_dependencies_are_injected(kv, settings, clock):
    seen = {}

    async def handler(cmd, units, activity):
        seen.update(cmd=cmd, units=units, activity=activity)

    services = build_services(kv, settings, clock)
    bus = build_message_bus(services, {CustomCommand: handler})
    cmd = CustomCommand()
    await bus.handle(cmd)

    assert seen == {"cmd": cmd, "units": services.units, "activity": services.activity}


def test_inject_dependencies_ignores_unknown_names():
    def handler(cmd, checklists):
        return cmd, checklists

    injected = inject_dependencies(handler, {"checklists": 1, "rollups": 2})
    assert injected("c") == ("c", 1)
