"""Building universe configurations from command-line style options."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable

DREAMLAND_API_LISTEN = "localhost:1421"
DEFAULT_DREAMLAND_URL = "http://" + DREAMLAND_API_LISTEN
DEFAULT_UNIVERSE_NAME = "blackhole"
DEFAULT_CLIENT_NAME = "client"
VALID_SUB_BINDS = ("http", "p2p", "dns", "https", "verbose", "copies")

VALID_SERVICES = ("seer", "auth", "patrick", "tns", "monkey", "hoarder", "substrate")
VALID_CLIENTS = ("seer", "auth", "patrick", "tns", "monkey", "hoarder", "substrate")

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class ConfigError(ValueError):
    """Raised when options do not describe a valid configuration."""


@dataclass
class ServiceConfig:
    """Configuration of one protocol service."""

    disabled: bool = False
    port: int = 0
    others: dict[str, int] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {"disabled": self.disabled, "port": self.port, "others": dict(self.others)}


@dataclass
class SimpleConfig:
    """Configuration of a simple node and the clients it carries."""

    port: int = 0
    clients: dict[str, dict[str, Any]] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {
            "port": self.port,
            "clients": {name: dict(conf) for name, conf in self.clients.items()},
        }


@dataclass
class UniverseConfig:
    """Services and simples a universe starts with."""

    services: dict[str, ServiceConfig] = field(default_factory=dict)
    simples: dict[str, SimpleConfig] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {
            "services": {name: conf.to_json() for name, conf in self.services.items()},
            "simples": {name: conf.to_json() for name, conf in self.simples.items()},
        }


def _format_list(items: Iterable[str]) -> str:
    return "[" + " ".join(items) + "]"


def clients_with_defaults(*names: str) -> dict[str, dict[str, Any]]:
    """Client configuration enabling each named client with default settings."""
    for name in names:
        if name not in VALID_CLIENTS:
            raise ConfigError(
                f"client `{name}` not valid, should be one of {_format_list(VALID_CLIENTS)}"
            )
    return {name: {} for name in names}


def filled_client_config() -> dict[str, dict[str, Any]]:
    """Client configuration with every known client enabled."""
    return clients_with_defaults(*VALID_CLIENTS)


def _parse_port(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        return 0
    return max(_INT32_MIN, min(_INT32_MAX, int(text)))


def build_service_config(
    enable: Iterable[str], disable: Iterable[str], binds: Iterable[str]
) -> dict[str, ServiceConfig]:
    """Choose the services to run and attach their port bindings."""
    enable = list(enable)
    disable = list(disable)
    if enable and disable:
        raise ConfigError("can't set enable and disable flags")

    if disable:
        services = [s for s in VALID_SERVICES if s not in disable]
    elif enable:
        services = enable
    else:
        services = list(VALID_SERVICES)

    return bind_config_services(binds, services)


def bind_config_services(
    binds: Iterable[str], services: Iterable[str]
) -> dict[str, ServiceConfig]:
    """Parse ``service@port/kind`` bindings and build per-service configs."""
    services = list(services)
    bound: dict[str, dict[str, int]] = {}

    for bind in binds:
        if not bind:
            continue

        parts = bind.split("@")
        if len(parts) not in (1, 2):
            raise ConfigError(f"processing bindings for `{bind}` failed")

        name = parts[0]
        if not name or name not in services:
            raise ConfigError(f"could not bind port of service `{name}`: disabled")

        sub = ""
        port = 0
        if len(parts) == 2:
            port_def = parts[1].split("/")
            port = _parse_port(port_def[0])
            if len(port_def) == 2:
                sub = port_def[1]
                if sub not in VALID_SUB_BINDS:
                    raise ConfigError(
                        f"`{sub}` not valid, should be one of: {_format_list(VALID_SUB_BINDS)}"
                    )
            else:
                sub = "main"

        ports = bound.setdefault(name, {})
        if sub == "https":
            ports["secure"] = 1
            ports["http"] = port
        else:
            ports[sub] = port

    used: dict[int, str] = {}
    for service, port_map in bound.items():
        for kind, port in port_map.items():
            if port in used:
                owner = used[port]
                owner_kind = ""
                for idx, other in bound[owner].items():
                    if other == port:
                        owner_kind = idx
                raise ConfigError(
                    "attempted duplicate port bindings "
                    f"[{owner}@{port}/{owner_kind}] and [{service}@{port}/{kind}]"
                )
            used[port] = service

    config: dict[str, ServiceConfig] = {}
    for service in services:
        ports = bound.get(service)
        config[service] = ServiceConfig(
            disabled=False,
            port=ports.get("main", 0) if ports else 0,
            others=dict(ports) if ports else {},
        )
    return config


def build_simple_config(simples: Iterable[str]) -> dict[str, SimpleConfig]:
    """A simple node with every client enabled for each name given."""
    return {name: SimpleConfig(clients=filled_client_config()) for name in simples}


def build_config(
    enable: Iterable[str],
    disable: Iterable[str],
    binds: Iterable[str],
    simples: Iterable[str],
) -> UniverseConfig:
    """Full universe configuration from service and simple options."""
    return UniverseConfig(
        services=build_service_config(enable, disable, binds),
        simples=build_simple_config(simples),
    )