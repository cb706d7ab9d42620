"""Service registration records and the naming-service interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable


class ServiceNotFoundError(LookupError):
    """Raised when a requested service is unknown."""

    def __init__(self, message: str = "service no found") -> None:
        super().__init__(message)


class Naming(ABC):
    """A registry where services register themselves and find one another."""

    @abstractmethod
    def find(self, service_name: str, *tags: str) -> list[DefaultService]:
        """Return the healthy services with this name carrying all given tags."""

    @abstractmethod
    def subscribe(
        self, service_name: str, callback: Callable[[list[DefaultService]], None]
    ) -> None:
        """Call back with the full service list whenever it changes."""

    @abstractmethod
    def unsubscribe(self, service_name: str) -> None:
        """Stop watching a service name."""

    @abstractmethod
    def register(self, service: DefaultService) -> None:
        """Register a service."""

    @abstractmethod
    def deregister(self, service_id: str) -> None:
        """Remove a registered service."""


def _go_list(items: list[str]) -> str:
    return "[" + " ".join(items) + "]"


def _go_map(mapping: dict[str, str]) -> str:
    return "map[" + " ".join(f"{k}:{mapping[k]}" for k in sorted(mapping)) + "]"


@dataclass
class DefaultService:
    """A service registration: identity, public address and metadata."""

    id: str
    name: str
    address: str = ""
    port: int = 0
    protocol: str = ""
    namespace: str = ""
    tags: list[str] = field(default_factory=list)
    meta: dict[str, str] = field(default_factory=dict)

    def dial_url(self) -> str:
        """Return the address to dial; tcp services omit the scheme."""
        if self.protocol == "tcp":
            return f"{self.address}:{self.port}"
        return f"{self.protocol}://{self.address}:{self.port}"

    def __str__(self) -> str:
        return (
            f"Id:{self.id},Name:{self.name},Address:{self.address},Port:{self.port},"
            f"Ns:{self.namespace},Tags:{_go_list(self.tags)},Meta:{_go_map(self.meta)}"
        )


def new_entry(id: str, name: str, protocol: str, address: str, port: int) -> DefaultService:
    """Build a service registration from its basic fields."""
    return DefaultService(id=id, name=name, address=address, port=port, protocol=protocol)