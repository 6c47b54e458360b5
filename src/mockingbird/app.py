"""MockServer: the ASGI application serving a mock directory tree.

Lifecycle::

    server = MockServer(ServerConfig(dirs=("mock",), prefix="/api"))
    await server.refresh()       # or let ASGI lifespan do it
    server.routes                # the published route table

Each refresh scans the directories in a worker thread, builds a fresh
``Dispatcher`` and swaps it in.  Requests always read whichever
dispatcher is current; a published table is never mutated.
"""

import asyncio
import logging

from mockingbird._internal.asgi import ASGIApp, Receive, Scope, Send
from mockingbird.config import ServerConfig
from mockingbird.routing.route import ResolvedRoute
from mockingbird.scanning.scanner import scan_routes
from mockingbird.scanning.types import ConfigRecord, IgnoreRecord, SkipRecord
from mockingbird.server.dispatch import Dispatcher
from mockingbird.server.handler import handle_request
from mockingbird.server.watcher import FileWatcher

logger = logging.getLogger("mockingbird.server")


class ScanReport:
    """Routes plus the audit trail of one scan cycle."""

    __slots__ = ("configs", "ignored", "routes", "skipped")

    def __init__(self) -> None:
        self.routes: tuple[ResolvedRoute, ...] = ()
        self.skipped: list[SkipRecord] = []
        self.ignored: list[IgnoreRecord] = []
        self.configs: list[ConfigRecord] = []


def run_scan(config: ServerConfig) -> ScanReport:
    """Scan the configured directories synchronously."""
    report = ScanReport()
    report.routes = tuple(
        scan_routes(
            config.resolved_dirs(),
            prefix=config.normalized_prefix,
            include=config.include,
            exclude=config.exclude,
            ignore_prefix=config.ignore_prefix,
            on_skip=report.skipped.append,
            on_ignore=report.ignored.append,
            on_config=report.configs.append,
            exclude_dirs=config.exclude_dirs,
        )
    )
    return report


class MockServer:
    """ASGI app answering requests from convention-named mock files.

    Args:
        config: Server configuration; defaults to ``ServerConfig()``.
        fallback: ASGI app receiving requests no mock matches.  Without
            one, unmatched requests get a plain 404.
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        fallback: ASGIApp | None = None,
    ) -> None:
        self.config = config or ServerConfig()
        self.config.validate()
        self.fallback = fallback
        self._dispatcher = Dispatcher()
        self._report = ScanReport()
        self._refresh_lock = asyncio.Lock()
        self._generation = 0
        self._published = 0
        self._watcher: FileWatcher | None = None

    # -- Route table --

    @property
    def routes(self) -> tuple[ResolvedRoute, ...]:
        return self._dispatcher.routes

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def skipped(self) -> tuple[SkipRecord, ...]:
        return tuple(self._report.skipped)

    @property
    def ignored(self) -> tuple[IgnoreRecord, ...]:
        return tuple(self._report.ignored)

    @property
    def configs(self) -> tuple[ConfigRecord, ...]:
        return tuple(self._report.configs)

    @property
    def generation(self) -> int:
        """Number of the scan cycle whose table is currently published."""
        return self._published

    async def refresh(self) -> tuple[ResolvedRoute, ...]:
        """Rescan the mock directories and publish the new route table.

        Cycles run one at a time.  A caller that queued behind a cycle
        which started after its own request reuses that cycle's result
        instead of scanning again.
        """
        self._generation += 1
        requested = self._generation
        async with self._refresh_lock:
            if self._published >= requested:
                return self.routes
            # Everything requested so far is covered by this cycle
            cycle = self._generation
            report = await asyncio.to_thread(run_scan, self.config)
            if cycle > self._published:
                self._report = report
                self._dispatcher = Dispatcher(report.routes)
                self._published = cycle
            logger.info(
                "Loaded %d mock routes (%d skipped, %d ignored)",
                len(report.routes),
                len(report.skipped),
                len(report.ignored),
            )
        return self.routes

    # -- Watch mode --

    async def start_watching(self) -> None:
        if self._watcher is None:
            self._watcher = FileWatcher(
                self.config.resolved_dirs(),
                self.refresh,
                interval=self.config.watch_interval,
                debounce=self.config.debounce,
                exclude_dirs=self.config.exclude_dirs,
            )
        await self._watcher.start()

    async def stop_watching(self) -> None:
        if self._watcher is not None:
            await self._watcher.stop()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            if self.fallback is not None:
                await self.fallback(scope, receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self._dispatcher,
            fallback=self.fallback,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Startup performs the first scan and starts the watcher when
        ``config.watch`` is set; shutdown stops the watcher.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.refresh()
                    if self.config.watch:
                        await self.start_watching()
                except Exception as exc:
                    logger.exception("Mock server startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.stop_watching()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Entry point --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve with uvicorn until interrupted."""
        from mockingbird.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            log_level=self.config.log_level.lower(),
        )
