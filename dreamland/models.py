"""Data shapes returned by the dreamland HTTP API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass
class EchartNode:
    """A node of a universe as drawn in the network chart."""

    id: str
    name: str
    category: int = 0
    value: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> EchartNode:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            category=int(data.get("category", 0) or 0),
            value=dict(data.get("value") or {}),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "value": dict(self.value),
        }


@dataclass
class EchartLink:
    """A peer connection between two nodes."""

    source: str
    target: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> EchartLink:
        return cls(source=data.get("source", ""), target=data.get("target", ""))

    def to_json(self) -> dict[str, Any]:
        return {"source": self.source, "target": self.target}


@dataclass
class EchartCategory:
    """The category (node kind) of a chart node."""

    name: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> EchartCategory:
        return cls(name=data.get("name", ""))

    def to_json(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass
class Echart:
    """The network chart of a universe: nodes, links and categories."""

    nodes: list[EchartNode] = field(default_factory=list)
    links: list[EchartLink] = field(default_factory=list)
    categories: list[EchartCategory] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Echart:
        return cls(
            nodes=[EchartNode.from_json(n) for n in data.get("nodes") or [] if n is not None],
            links=[EchartLink.from_json(l) for l in data.get("links") or [] if l is not None],
            categories=[
                EchartCategory.from_json(c) for c in data.get("categories") or [] if c is not None
            ],
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_json() for n in self.nodes],
            "links": [l.to_json() for l in self.links],
            "categories": [c.to_json() for c in self.categories],
        }


@dataclass
class UniverseInfo:
    """Identity of a universe."""

    id: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> UniverseInfo:
        return cls(id=data.get("id", ""))


@dataclass
class UniverseStatus:
    """Summary of a running universe as listed by the multiverse status."""

    node_count: int = 0
    nodes: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> UniverseStatus:
        nodes = data.get("Nodes")
        if nodes is None:
            nodes = data.get("nodes")
        return cls(
            node_count=int(data.get("node-count", 0) or 0),
            nodes={key: list(value or []) for key, value in (nodes or {}).items()},
        )