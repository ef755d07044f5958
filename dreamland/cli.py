"""Command line for driving a running dreamland multiverse."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Callable, Sequence

from dreamland import actions
from dreamland.arguments import ArgumentError, get_name, get_universe, get_universe0
from dreamland.client import Client, DreamlandError
from dreamland.config import (
    DEFAULT_CLIENT_NAME,
    DEFAULT_DREAMLAND_URL,
    DEFAULT_UNIVERSE_NAME,
    VALID_SERVICES,
    ConfigError,
)

CLIENT_TIMEOUT = 300.0
"""Seconds the command line waits on the multiverse API."""

Handler = Callable[[Client, argparse.Namespace], None]


def _csv(value: str) -> list[str]:
    return [item for item in value.split(",") if item]


def _add_list(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    parser.add_argument(
        f"--{name}", type=_csv, action="extend", default=[], metavar="A,B", help=help_text
    )


def _add_positional(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("args", nargs="*", help=argparse.SUPPRESS)


def _add_name(parser: argparse.ArgumentParser, default: str = "") -> None:
    parser.add_argument("-n", "--name", default=default)


def _add_names(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-n", "--names", default="")


def _add_universe(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-u", "--universe", "--to", dest="universe", default=DEFAULT_UNIVERSE_NAME
    )


def _universe0(args: argparse.Namespace) -> str:
    return get_universe0(args.args, args.universe)


def _universe1(args: argparse.Namespace) -> str:
    return get_universe(args.args, args.universe)


def _name(args: argparse.Namespace) -> str:
    return get_name(args.args, args.name)


def _names(args: argparse.Namespace) -> str:
    return get_name(args.args, args.names)


# inject ---------------------------------------------------------------------


def _inject_simple(client: Client, args: argparse.Namespace) -> None:
    universe = _universe1(args)
    name = _name(args)
    actions.inject_simple(client.universe(universe), name, args.enable, args.disable, args.empty)


def _inject_services(client: Client, args: argparse.Namespace) -> None:
    universe = _universe1(args)
    names = _names(args)
    actions.inject_services(client.universe(universe), names)


def _inject_fixture(client: Client, args: argparse.Namespace) -> None:
    universe = _universe1(args)
    name = _name(args)
    actions.inject_fixture(client.universe(universe), name, args.param)


def _inject_service(service: str) -> Handler:
    def handler(client: Client, args: argparse.Namespace) -> None:
        actions.inject_service(client.universe(_universe0(args)), service, args.http)

    return handler


def _build_inject(subparsers: Any) -> None:
    parser = subparsers.add_parser("inject", help="Add nodes or fixtures to a universe")
    commands = parser.add_subparsers(dest="subcommand", required=True)

    services = commands.add_parser("services", help="Start several services")
    _add_positional(services)
    _add_names(services)
    _add_universe(services)
    services.set_defaults(handler=_inject_services)

    simple = commands.add_parser("simple", help="Start a simple node")
    _add_positional(simple)
    _add_list(simple, "enable", "Starts a simple node with these clients enabled")
    _add_list(simple, "disable", "Starts a simple node with these clients disabled")
    simple.add_argument("--empty", action="store_true", help="Starts an empty simple")
    _add_name(simple, DEFAULT_CLIENT_NAME)
    _add_universe(simple)
    simple.set_defaults(handler=_inject_simple)

    fixture = commands.add_parser("fixture", help="Run a fixture")
    _add_positional(fixture)
    _add_name(fixture)
    _add_universe(fixture)
    fixture.add_argument("-p", "--param", action="append", default=[])
    fixture.set_defaults(handler=_inject_fixture)

    for service in VALID_SERVICES:
        command = commands.add_parser(service, help=f"Start a {service} service")
        _add_positional(command)
        command.add_argument("--http", type=int, default=0)
        _add_universe(command)
        command.set_defaults(handler=_inject_service(service))


# kill -----------------------------------------------------------------------


def _kill_simple(client: Client, args: argparse.Namespace) -> None:
    universe = _universe1(args)
    name = _name(args)
    client.universe(universe).kill_simple(name)


def _kill_services(client: Client, args: argparse.Namespace) -> None:
    universe = _universe1(args)
    names = _names(args)
    actions.kill_services(client.universe(universe), names)


def _kill_universe(client: Client, args: argparse.Namespace) -> None:
    client.universe(_name(args)).kill()


def _kill_service(service: str) -> Handler:
    def handler(client: Client, args: argparse.Namespace) -> None:
        client.universe(_universe0(args)).kill_service(service)

    return handler


def _build_kill(subparsers: Any) -> None:
    parser = subparsers.add_parser("kill", help="Stop nodes or universes")
    commands = parser.add_subparsers(dest="subcommand", required=True)

    simple = commands.add_parser("simple", help="Stop a simple node")
    _add_positional(simple)
    _add_name(simple, DEFAULT_CLIENT_NAME)
    _add_universe(simple)
    simple.set_defaults(handler=_kill_simple)

    services = commands.add_parser("services", help="Stop several services")
    _add_positional(services)
    _add_names(services)
    _add_universe(services)
    services.set_defaults(handler=_kill_services)

    universe = commands.add_parser("universe", help="Stop a universe")
    _add_positional(universe)
    _add_name(universe, DEFAULT_UNIVERSE_NAME)
    universe.set_defaults(handler=_kill_universe)

    for service in VALID_SERVICES:
        command = commands.add_parser(service, help=f"Stop the {service} service")
        _add_positional(command)
        _add_universe(command)
        command.set_defaults(handler=_kill_service(service))


# new ------------------------------------------------------------------------


def _new_universe(client: Client, args: argparse.Namespace) -> None:
    actions.new_universe(
        client,
        _name(args),
        empty=args.empty,
        enable=args.enable,
        disable=args.disable,
        binds=args.bind,
        fixtures=args.fixtures,
        simples=args.simples,
    )


def _build_new(subparsers: Any) -> None:
    parser = subparsers.add_parser("new", help="Start universes")
    commands = parser.add_subparsers(dest="subcommand", required=True)

    universe = commands.add_parser("universe", help="Start a universe")
    _add_positional(universe)
    universe.add_argument(
        "--empty", action="store_true", help="Create an empty universe (Overrides the below)"
    )
    _add_list(universe, "enable", "List services separated by comma ( Conflicts with disable )")
    _add_list(universe, "disable", "List services separated by comma ( Conflicts with enable )")
    _add_list(universe, "bind", "service@0000/http,...,service@0000/p2p,...")
    _add_list(universe, "fixtures", "List fixtures separated by comma")
    _add_list(universe, "simples", "List simples separated by comma")
    _add_name(universe, DEFAULT_UNIVERSE_NAME)
    universe.set_defaults(handler=_new_universe)


# status ---------------------------------------------------------------------


def _status_universe(client: Client, args: argparse.Namespace) -> None:
    chart = client.universe(_name(args)).status()
    print(actions.universe_status_table(chart))


def _status_id(client: Client, args: argparse.Namespace) -> None:
    info = client.universe(_name(args)).id()
    print(f"Universe id: {info.id}")


def _status_service(service: str) -> Handler:
    def handler(client: Client, args: argparse.Namespace) -> None:
        chart = client.universe(_universe0(args)).status()
        print(actions.service_status(chart, service))

    return handler


def _build_status(subparsers: Any) -> None:
    parser = subparsers.add_parser("status", help="Show what runs in a universe")
    commands = parser.add_subparsers(dest="subcommand", required=True)

    universe = commands.add_parser("universe", aliases=["u"], help="Nodes of a universe")
    _add_positional(universe)
    _add_name(universe, DEFAULT_UNIVERSE_NAME)
    universe.set_defaults(handler=_status_universe)

    ident = commands.add_parser("id", help="Identity of a universe")
    _add_positional(ident)
    _add_name(ident, DEFAULT_UNIVERSE_NAME)
    ident.set_defaults(handler=_status_id)

    for service in VALID_SERVICES:
        command = commands.add_parser(service, help=f"Ports of the {service} service")
        _add_positional(command)
        _add_universe(command)
        command.set_defaults(handler=_status_service(service))


def build_parser() -> argparse.ArgumentParser:
    """Parser for every dreamland subcommand."""
    parser = argparse.ArgumentParser(prog="dreamland")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _build_new(subparsers)
    _build_inject(subparsers)
    _build_kill(subparsers)
    _build_status(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        client = Client(DEFAULT_DREAMLAND_URL, timeout=CLIENT_TIMEOUT)
    except DreamlandError as err:
        print(f"Starting new dreamland client failed with: {err}", file=sys.stderr)
        return 1

    try:
        with client:
            args.handler(client, args)
    except KeyboardInterrupt:
        print("Received signal... Shutting down.")
        return 130
    except (DreamlandError, ConfigError, ArgumentError) as err:
        print(err, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())