"""
loop.py — UI Task Queue
=======================
One asyncio event loop on one background thread.  Every view mutation
runs there; request threads hand work over and, when they need an
answer, wait for it.

    ui = UiLoop()
    ui.start()
    view = ui.call(orchestrator.view())          # block for the result
    ui.submit(orchestrator.hover_start(a, b))     # fire, get a Future
    ui.stop()

Tasks created on the loop (hover previews) outlive the call that
created them; that is the whole point of running the loop on its own
thread instead of one loop per request.
"""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Coroutine, Optional


logger = logging.getLogger(__name__)


class UiLoop:

    def __init__(self, name: str = "ui-loop"):
        self.name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the loop thread and wait until it accepts work."""
        if self.running:
            logger.warning("UI loop already running")
            return

        self._ready.clear()
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        self._ready.wait()
        logger.info("UI loop started")

    def stop(self, timeout: float = 10.0) -> None:
        """Stop the loop; tasks still pending are cancelled."""
        if not self.running:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=timeout)
        self._thread = None
        logger.info("UI loop stopped")

    def submit(self, coro: Coroutine[Any, Any, Any]) -> concurrent.futures.Future:
        """Schedule `coro` on the loop; returns a thread-safe Future."""
        if not self.running:
            coro.close()
            raise RuntimeError("UI loop is not running")
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def call(self, coro: Coroutine[Any, Any, Any], timeout: Optional[float] = None) -> Any:
        """Run `coro` on the loop and block the calling thread for its result."""
        return self.submit(coro).result(timeout)

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._ready.set()
        try:
            self._loop.run_forever()
        finally:
            pending = asyncio.all_tasks(self._loop)
            for task in pending:
                task.cancel()
            if pending:
                self._loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            self._loop.close()
