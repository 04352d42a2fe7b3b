"""Per-invocation state shared by the CLI commands.

The top-level group records where the store lives and how the train is
configured; the application itself is only bootstrapped when a subcommand
actually needs it, so ``pvtrack --help`` never touches the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import click

from pvtrack.bootstrap import AppContainer, UnsupportedStoreUrlError, bootstrap, build_store
from pvtrack.config import TrackerSettings
from pvtrack.domain.errors import InvalidUnitIdError
from pvtrack.domain.unit_ids import normalize_unit_id
from pvtrack.interfaces.kv_store import KeyValueStoreError

from .helpers import sanitize_store_url


@dataclass
class CliState:
    """Options of the top-level group plus the lazily built application."""

    store_url: str
    settings: TrackerSettings
    _app: AppContainer | None = field(default=None, repr=False)

    @property
    def app(self) -> AppContainer:
        """The bootstrapped application.

        Raises:
            click.ClickException: If the store cannot be opened.
        """
        if self._app is None:
            try:
                store = build_store(self.store_url)
            except (UnsupportedStoreUrlError, KeyValueStoreError, OSError) as e:
                raise click.ClickException(
                    f"Cannot open store {sanitize_store_url(self.store_url)}: {e}"
                ) from e
            self._app = bootstrap(store=store, settings=self.settings)
        return self._app

    def unit_id(self, value: str) -> str:
        """Normalize a unit argument such as ``5`` or ``PV05``.

        Raises:
            click.BadParameter: If the unit is not part of the train.
        """
        try:
            return normalize_unit_id(value, self.settings.total_units)
        except InvalidUnitIdError as e:
            raise click.BadParameter(str(e), param_hint="UNIT") from e


pass_state = click.make_pass_decorator(CliState)
