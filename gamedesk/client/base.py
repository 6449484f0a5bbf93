"""ResourceClient contract.

One remote call per invocation, no implicit retries and no local merging:
``update`` sends exactly the fields it is given and the remote store merges
them into the existing record.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from gamedesk.models.games import Game


class ResourceClient(ABC):
    """Uniform asynchronous CRUD contract over the remote game collection.

    Every method raises a ``ClientError`` subclass on failure:
    ``RemoteError`` for non-success statuses, ``NotFound`` when ``fetch_one``
    targets a missing record, ``NetworkFailure`` when no usable response arrived.
    """

    @abstractmethod
    async def create(self, record: Mapping[str, object]) -> Game:
        """Create a record from a full field map (``released`` already in wire form)."""

    @abstractmethod
    async def fetch_all(self) -> list[Game]:
        """Fetch every record.  Each call re-fetches."""

    @abstractmethod
    async def fetch_one(self, game_id: str) -> Game:
        """Fetch a single record by identifier."""

    @abstractmethod
    async def update(self, game_id: str, fields: Mapping[str, object]) -> Game:
        """Send a sparse or full field map; the remote merges it server-side."""

    @abstractmethod
    async def delete(self, game_id: str) -> None:
        """Delete a record."""

    async def close(self) -> None:  # noqa: B027
        """Release any connection resources held by the client."""
