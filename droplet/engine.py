"""Backend interfaces the run driver talks to.

The driver only needs a handful of operations from the automation engine
and the cloud provider. Keeping them behind these small classes lets the
whole flow run against an in-memory fake in tests.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List

IP_OUTPUT = "dropletIP"
NAME_OUTPUT = "dropletName"


class Mode(Enum):
    CREATE = "create"
    DESTROY = "destroy"


@dataclass(frozen=True)
class DropletSpec:
    image: str
    size: str
    region: str
    ssh_keys: List[str] = field(default_factory=list)
    user_data: str = ""


@dataclass
class DropletHandle:
    """Values exposed by a declared droplet, resolved by the engine later."""

    ipv4_address: Any
    name: Any


class Provider(ABC):
    """Cloud provider calls made from inside the deployment program."""

    @abstractmethod
    def lookup_ssh_key(self, name: str) -> str:
        """Return the fingerprint of the SSH key registered under name."""

    @abstractmethod
    def create_droplet(self, resource_name: str, spec: DropletSpec) -> DropletHandle:
        """Declare one droplet resource."""

    @abstractmethod
    def export(self, name: str, value: Any) -> None:
        """Register a stack output."""


class Stack(ABC):
    """One project/stack pair in the engine's state store."""

    @abstractmethod
    def install_plugin(self, name: str, version: str) -> None: ...

    @abstractmethod
    def set_config(self, key: str, value: str, secret: bool = False) -> None: ...

    @abstractmethod
    def refresh(self) -> None: ...

    @abstractmethod
    def destroy(self) -> None: ...

    @abstractmethod
    def up(self) -> Dict[str, Any]:
        """Apply the program and return the stack outputs as plain values."""

    @abstractmethod
    def preview(self) -> Dict[str, int]:
        """Compute pending changes without applying them, keyed by operation."""


class Engine(ABC):
    @abstractmethod
    def select_stack(self, project_name: str, stack_name: str,
                     program: Callable[[], None]) -> Stack:
        """Create the stack if needed, otherwise select the existing one."""
