"""Application bootstrap for GameDesk.

Wires the components in dependency order and manages the asyncio lifecycle.
Startup order: config → logging → resource client → session registry → REST

Shutdown stops components in reverse order.  Open edit sessions are closed
first; their in-flight remote writes are left to finish on their own.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from gamedesk.config import load_config
from gamedesk.models.config import GameDeskConfig
from gamedesk.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog

    from gamedesk.api.sessions import SessionRegistry
    from gamedesk.client.base import ResourceClient

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class GameDeskApp:
    """Application root.  Owns every component and coordinates their lifecycle.

    Calling ``stop()`` on an app that was never started (or already stopped)
    is safe.
    """

    def __init__(self, config: GameDeskConfig | None = None) -> None:
        self.config = config
        self._client: ResourceClient | None = None
        self._sessions: SessionRegistry | None = None
        self._rest_server: object | None = None
        self._background_tasks: list[asyncio.Task[None]] = []
        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def serving(self) -> bool:
        """True while started and the REST server task is still alive."""
        return self._running and all(not task.done() for task in self._background_tasks)

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start.
        """
        if self.config is None:
            self.config = load_config()

        setup_logging(self.config.log.level, self.config.log.format)
        self._log = get_logger("app")
        self._log.info("gamedesk starting", version=_gamedesk_version())

        await self._start_client()
        await self._start_sessions()
        await self._start_rest()

        self._running = True
        self._log.info("gamedesk started", host=self.config.api.host, port=self.config.api.port)

    async def _start_client(self) -> None:
        assert self._log is not None
        assert self.config is not None
        try:
            from gamedesk.client.http import HttpResourceClient

            self._client = HttpResourceClient.from_config(self.config.remote)
            self._log.info(
                "resource client started",
                base_url=self.config.remote.base_url,
                collection=self.config.remote.collection,
                timeout=self.config.remote.timeout_seconds or None,
            )
        except Exception as exc:
            raise _ComponentError("client", exc) from exc

    async def _start_sessions(self) -> None:
        assert self._log is not None
        assert self._client is not None
        assert self.config is not None
        from gamedesk.api.sessions import SessionRegistry

        self._sessions = SessionRegistry(self._client, max_sessions=self.config.api.max_sessions)
        self._log.debug("session registry started")

    async def _start_rest(self) -> None:
        """Start the uvicorn REST server."""
        assert self._log is not None
        assert self.config is not None
        assert self._client is not None
        self._log.debug("starting rest api")
        try:
            import uvicorn

            from gamedesk.api import build_app

            fastapi_app = build_app(client=self._client, config=self.config, sessions=self._sessions)
            uv_config = uvicorn.Config(
                app=fastapi_app,
                host=self.config.api.host,
                port=self.config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
            server = uvicorn.Server(uv_config)
            task = asyncio.create_task(server.serve(), name="rest-server")
            self._background_tasks.append(task)
            self._rest_server = server
            self._log.info("rest api started", port=self.config.api.port)
        except Exception as exc:
            raise _ComponentError("rest", exc) from exc

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Stop all components in reverse startup order."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("gamedesk shutting down")
        self._running = False

        if self._rest_server is not None:
            self._rest_server.should_exit = True  # type: ignore[attr-defined]

        if self._background_tasks:
            _done, pending = await asyncio.wait(self._background_tasks, timeout=_SHUTDOWN_GRACE_SECONDS)
            for task in pending:
                task.cancel()
            if pending:
                log.warning("component stop timed out", component="rest", timeout=_SHUTDOWN_GRACE_SECONDS)
                await asyncio.gather(*pending, return_exceptions=True)
        self._background_tasks.clear()
        self._rest_server = None

        if self._sessions is not None:
            self._sessions.close_all()
            self._sessions = None

        if self._client is not None:
            try:
                await self._client.close()
            except Exception as exc:
                log.error("component stop raised an error", component="client", error=str(exc))
            self._client = None

        log.info("gamedesk stopped")


def _gamedesk_version() -> str:
    from gamedesk import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main(config: GameDeskConfig | None = None) -> None:
    """Create the app, register OS signals, run until shutdown is requested.

    *config* defaults to ``load_config()`` at start.
    """
    app = GameDeskApp(config)
    loop = asyncio.get_running_loop()

    shutdown_requested = False

    def _request_shutdown() -> None:
        nonlocal shutdown_requested
        shutdown_requested = True

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_shutdown)

    try:
        await app.start()
        while app.serving and not shutdown_requested:
            await asyncio.sleep(1)
    except _ComponentError as exc:
        log = get_logger("app")
        log.critical(
            "fatal startup error",
            component=exc.component,
            error=str(exc.cause),
        )
        await app.stop()
        raise SystemExit(1) from exc
    finally:
        if app.running:
            await app.stop()
