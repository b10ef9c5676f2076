"""Shared interface for resource synchronizers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from .data import ResourceData


class ResourceSync(ABC):
    """Reconciles one locally declared resource against its remote counterpart.

    Concrete synchronizers supply the remote calls, the field projection and
    the lifecycle state tables; ``sync.driver`` sequences them and polls.
    """

    #: States to keep polling in after create
    created_pending: ClassVar[frozenset[str]] = frozenset()
    #: States that mean create has finished
    created_target: ClassVar[frozenset[str]] = frozenset()
    #: States to keep polling in after delete
    deleted_pending: ClassVar[frozenset[str]] = frozenset()
    #: States that mean delete has finished
    deleted_target: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, data: ResourceData):
        self.data = data
        self.diagnostics: list[str] = []

    @abstractmethod
    def create(self) -> None:
        """Create the remote resource and record the returned snapshot."""

    @abstractmethod
    def get(self) -> None:
        """Refresh the snapshot from the remote service."""

    @abstractmethod
    def delete(self) -> bool:
        """Request deletion of the remote resource.

        Returns:
            False if no remote call was made, True otherwise
        """

    @abstractmethod
    def id(self) -> str:
        """Return the external identifier derived from the current snapshot."""

    @abstractmethod
    def state(self) -> str | None:
        """Return the lifecycle state of the current snapshot."""

    @abstractmethod
    def set_data(self) -> None:
        """Project the current snapshot into the local state."""
