"""Watch mode: re-run the generator once per debounced batch of changes."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Iterable, Iterator, Optional, Set, Tuple

from watchfiles import Change, DefaultFilter, watch
from watchfiles._rust_notify import WatchfilesRustInternalError

from .errors import IpcgenError
from .logging import get_logger
from .pipeline import Generator

ChangeBatch = Set[Tuple[Change, str]]

RESTART_DELAY = 1.0


class SourceFilter(DefaultFilter):
    """Only report changes to source files, never to the generated output."""

    def __init__(self, extensions: Iterable[str], output: Path | None = None) -> None:
        super().__init__()
        self.extensions = tuple(extensions)
        self.output = Path(output).resolve().as_posix() if output is not None else None

    def __call__(self, change: Change, path: str) -> bool:
        normalized = path.replace("\\", "/")
        if self.output is not None and Path(path).resolve().as_posix() == self.output:
            return False
        return normalized.endswith(self.extensions) and super().__call__(change, path)


class WatchLoop:
    """Single consumer of change batches; passes never overlap.

    A watcher that fails while delivering changes is logged and recreated.
    Only a failure to start, an exhausted change source or `stop_event` ends
    the loop.
    """

    def __init__(
        self,
        generator: Generator,
        *,
        changes: Optional[Iterable[ChangeBatch]] = None,
        stop_event: Optional[threading.Event] = None,
        restart_delay: float = RESTART_DELAY,
    ) -> None:
        self.generator = generator
        self.stop_event = stop_event
        self.restart_delay = restart_delay
        self._changes = changes
        self.logger = get_logger("watch")
        self.passes = 0
        self.failures = 0
        self.watcher_errors = 0

    def _watch(self) -> Iterator[ChangeBatch]:
        settings = self.generator.config.watch
        # `step` is the quiet window; `debounce` caps how long one batch may grow.
        return watch(
            self.generator.input,
            watch_filter=SourceFilter(self.generator.config.extensions, self.generator.output),
            debounce=max(settings.debounce_ms, settings.quiet_ms),
            step=settings.quiet_ms,
            stop_event=self.stop_event,
        )

    def _open(self) -> Iterator[ChangeBatch]:
        if self._changes is not None:
            return iter(self._changes)
        return self._watch()

    def _stopped(self) -> bool:
        return self.stop_event is not None and self.stop_event.is_set()

    def run_pass(self) -> bool:
        """Run one pass, logging instead of raising on failure."""
        self.passes += 1
        try:
            self.generator.run()
        except (IpcgenError, OSError) as exc:
            self.failures += 1
            self.logger.error("%s", exc)
            return False
        return True

    def run(self) -> None:
        """Run an initial pass, then one pass per change batch until the source ends."""
        self.logger.info("Watching for changes in %s...", self.generator.input)
        changes = self._open()

        if not self.run_pass():
            self.logger.error("Initial processing failed; waiting for changes")

        while not self._stopped():
            try:
                batch = next(changes)
            except StopIteration:
                break
            except WatchfilesRustInternalError as exc:
                self.watcher_errors += 1
                self.logger.error("Watcher error: %s", exc)
                if self.restart_delay:
                    time.sleep(self.restart_delay)
                changes = self._open()
                continue

            if self._stopped():
                break
            if not batch:
                continue
            self.logger.info("Detected changes")
            for _change, path in sorted(batch, key=lambda item: item[1]):
                self.logger.debug("  %s", path)
            self.run_pass()


__all__ = ["SourceFilter", "WatchLoop"]
