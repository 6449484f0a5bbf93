"""Error taxonomy for GameDesk.

ValidationError  -- local and field-scoped; never reaches the network.
ClientError      -- base for every failure raised by a ResourceClient.
RemoteError      -- the remote answered with a non-success status.
NotFound         -- the remote reports the requested record absent.
NetworkFailure   -- the request never got a usable response.
LoadFailure      -- an edit session could not be seeded; terminal for it.
"""

from __future__ import annotations


class GameDeskError(Exception):
    """Base class for all GameDesk errors."""


class ValidationError(GameDeskError):
    """One or more fields failed validation.

    ``errors`` maps every failing field to its message so callers can report
    the full set at once.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(f"{name}: {msg}" for name, msg in self.errors.items()))


class UnknownFieldError(GameDeskError, ValueError):
    """Raised when an edit names a field the game record does not have."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Unknown field: {field!r}")
        self.field = field


class ClientError(GameDeskError):
    """Base for failures raised by a ResourceClient."""


class RemoteError(ClientError):
    """Non-success HTTP status from the remote collection."""

    def __init__(self, status: int, detail: str = "") -> None:
        message = f"HTTP error! status: {status}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.status = status
        self.detail = detail


class NotFound(RemoteError):
    """The remote reports the requested record absent."""

    def __init__(self, game_id: str, status: int = 404) -> None:
        super().__init__(status, f"game {game_id!r} not found")
        self.game_id = game_id


class NetworkFailure(ClientError):
    """The request never got a usable response (transport, redirect or decoding failure)."""


class LoadFailure(GameDeskError):
    """An edit session could not be created because the record failed to load."""

    def __init__(self, game_id: str, cause: ClientError) -> None:
        super().__init__(f"Error loading game: {cause}")
        self.game_id = game_id
        self.cause = cause

    @property
    def not_found(self) -> bool:
        return isinstance(self.cause, NotFound)


class SessionClosedError(GameDeskError):
    """The edit session was closed; no further edits are accepted."""
