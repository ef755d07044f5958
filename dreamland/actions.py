"""What the command-line subcommands do against a running multiverse."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from tabulate import tabulate

from dreamland import inject
from dreamland.client import Client, DreamlandError, Universe
from dreamland.config import (
    DEFAULT_CLIENT_NAME,
    VALID_CLIENTS,
    ConfigError,
    ServiceConfig,
    SimpleConfig,
    UniverseConfig,
    build_config,
    clients_with_defaults,
)
from dreamland.models import Echart

DEFAULT_HOST = "127.0.0.1"
"""Host the dreamland HTTP services listen on unless told otherwise."""


def _format_list(items: Iterable[str]) -> str:
    return "[" + " ".join(items) + "]"


def check_clients_valid(valid_clients: Sequence[str], clients: Iterable[str]) -> None:
    """Raise ConfigError for the first client that is not in ``valid_clients``."""
    for client in clients:
        if client not in valid_clients:
            raise ConfigError(
                f"client `{client}` not valid, should be one of {_format_list(valid_clients)}"
            )


def simple_config(
    enable: Sequence[str] = (), disable: Sequence[str] = (), empty: bool = False
) -> SimpleConfig:
    """Configuration of a simple node carrying the chosen clients."""
    enable = list(enable)
    disable = list(disable)

    if empty:
        if enable or disable:
            raise ConfigError("enable and disable are useless when creating empty")
        return SimpleConfig()

    if enable and disable:
        raise ConfigError("enable and disable flags cannot be paired")

    if enable:
        check_clients_valid(VALID_CLIENTS, enable)
        chosen = enable
    elif disable:
        check_clients_valid(VALID_CLIENTS, disable)
        chosen = [client for client in VALID_CLIENTS if client not in disable]
    else:
        chosen = list(VALID_CLIENTS)

    return SimpleConfig(clients=clients_with_defaults(*chosen))


def inject_simple(
    universe: Universe,
    name: str,
    enable: Sequence[str] = (),
    disable: Sequence[str] = (),
    empty: bool = False,
) -> None:
    """Start a simple node called ``name`` in ``universe``."""
    universe.inject(inject.simple(name, simple_config(enable, disable, empty)))


def inject_service(universe: Universe, name: str, http: int = 0) -> None:
    """Start the service ``name``, optionally on a fixed HTTP port."""
    others = {"http": http} if http else {}
    universe.inject(inject.service(name, ServiceConfig(others=others)))


def inject_services(universe: Universe, names: str) -> None:
    """Start each service of a comma-separated list."""
    config = ServiceConfig()
    universe.inject(*(inject.service(name, config) for name in names.split(",")))


def inject_fixture(universe: Universe, name: str, params: Iterable[Any] = ()) -> None:
    """Run the fixture ``name`` with ``params`` in ``universe``."""
    universe.inject(inject.fixture(name, list(params)))


def kill_services(universe: Universe, names: str) -> None:
    """Stop each service of a comma-separated list, stopping at the first failure."""
    for name in names.split(","):
        universe.kill_service(name)


def run_fixtures(client: Client, fixtures: Iterable[str], universes: Iterable[str]) -> None:
    """Run every fixture in every universe."""
    injections = [inject.fixture(name, None) for name in fixtures]
    for name in universes:
        try:
            client.universe(name).inject(*injections)
        except DreamlandError as err:
            raise DreamlandError(f"injecting fixtures into `{name}` failed with: {err}") from err


def new_universe(
    client: Client,
    name: str,
    empty: bool = False,
    enable: Sequence[str] = (),
    disable: Sequence[str] = (),
    binds: Sequence[str] = (),
    fixtures: Sequence[str] = (),
    simples: Sequence[str] = (),
) -> None:
    """Start a universe called ``name`` and run the given fixtures in it."""
    if empty:
        client.start_universe_with_config(name, UniverseConfig())

    simples = list(simples) or [DEFAULT_CLIENT_NAME]
    config = build_config(enable, disable, binds, simples)
    client.start_universe_with_config(name, config)
    run_fixtures(client, fixtures, [name])


def _merge_leading(rows: list[list[Any]], columns: int) -> list[list[Any]]:
    merged = []
    previous: list[Any] | None = None
    for row in rows:
        shown = list(row)
        if previous is not None:
            for col in range(columns):
                if row[col] != previous[col]:
                    break
                shown[col] = ""
        merged.append(shown)
        previous = row
    return merged


def universe_status_table(chart: Echart) -> str:
    """Table of every node of a universe with its protocol ports."""
    rows = [
        ["Nodes", node.name, protocol, port]
        for node in chart.nodes
        for protocol, port in node.value.items()
    ]
    return tabulate(_merge_leading(rows, 2), tablefmt="grid")


def service_status(chart: Echart, name: str, host: str = DEFAULT_HOST) -> str:
    """Link and port table of the first node whose name contains ``name``."""
    http = 0
    secure = 0
    rows: list[list[Any]] = []
    for node in chart.nodes:
        if rows:
            break
        if name not in node.name:
            continue
        for protocol, port in node.value.items():
            if protocol == "http":
                http = port
            elif protocol == "secure":
                secure = port
            rows.append([node.name, protocol, port])

    if not rows:
        raise DreamlandError(f"Failed getting service name '{name}'")

    out = ""
    if http:
        scheme = "https" if secure == 1 else "http"
        out = f"\n@ {scheme}://{host}:{http}\n\n"
    return out + tabulate(_merge_leading(rows, 1), tablefmt="grid")