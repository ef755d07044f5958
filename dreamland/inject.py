"""Injections: requests that add fixtures, services or simples to a universe."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Method(Enum):
    """HTTP method used to run an injection."""

    GET = 0
    POST = 1
    DELETE = 2

    def __str__(self) -> str:
        return self.name


@dataclass
class Injectable:
    """Something that can be injected into a named universe."""

    name: str
    route: str
    method: Method = Method.POST
    params: Any = None
    config: Any = None

    def path(self, universe: str) -> str:
        """The API path that runs this injection against ``universe``."""
        return f"/{self.route}/{universe}/{self.name}"


def fixture(name: str, params: Any = None) -> Injectable:
    """Run the fixture ``name`` with ``params``."""
    return Injectable(name=name, route="fixture", method=Method.POST, params=params)


def service(name: str, config: Any = None) -> Injectable:
    """Start the service ``name`` with ``config``."""
    return Injectable(name=name, route="service", method=Method.POST, config=config)


def simple(name: str, config: Any = None) -> Injectable:
    """Start a simple node called ``name`` with ``config``."""
    return Injectable(name=name, route="simple", method=Method.POST, config=config)