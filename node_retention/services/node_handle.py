"""Node Handle — the contract a host's node object must satisfy.

Invariants:
    - uptime_duration() is the only fallible fact accessor; transient failures
      are raised as FactFetchError or TimeoutError
    - trigger_idle_timeout() is invoked at most once per qualifying evaluation
    - The retention core never provisions, connects, or terminates on its own

Design Decisions:
    - typing.Protocol over a base class: host nodes (cloud SDK wrappers, test
      doubles) conform structurally, the core never imports a cloud client
"""

from datetime import timedelta
from typing import Protocol


class NodeHandle(Protocol):
    """Read-only view of one compute node plus its teardown/connect actions."""

    name: str

    def is_idle(self) -> bool: ...

    def is_offline(self) -> bool: ...

    def is_provisioned(self) -> bool:
        """False once the node record has been deleted."""
        ...

    async def uptime_duration(self) -> timedelta:
        """Time since instance launch. Queries the cloud provider; may raise."""
        ...

    def running_duration(self) -> timedelta: ...

    def idle_duration(self) -> timedelta: ...

    async def trigger_idle_timeout(self) -> None:
        """Tear the node down."""
        ...

    async def connect(self, force: bool) -> None: ...
