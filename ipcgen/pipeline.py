"""Single-pass orchestration: walk, match, validate, emit."""

from __future__ import annotations

import time
from pathlib import Path

from .annotations import match_annotations, render_signature
from .config import IpcgenConfig
from .emitter import ModuleEmitter
from .errors import ConfigError
from .logging import get_logger
from .models import Matched, PassResult, PassState
from .registry import EndpointRegistry
from .source_scanner import SourceScanner


def format_duration(seconds: float) -> str:
    """Render a pass duration the way the status line reports it."""
    if seconds >= 1:
        return f"{int(seconds)} seconds"
    return f"{int(seconds * 1000)} ms"


class Generator:
    """Runs complete generation passes for one configuration.

    Every call to `run` builds a fresh registry; nothing is carried between
    passes except the configuration.
    """

    def __init__(
        self,
        config: IpcgenConfig,
        *,
        scanner: SourceScanner | None = None,
        emitter: ModuleEmitter | None = None,
    ) -> None:
        if config.input is None:
            raise ConfigError("No input directory configured")
        self.config = config
        self.scanner = scanner or SourceScanner(config.extensions, config.exclude_paths)
        self.emitter = emitter or ModuleEmitter()
        self.logger = get_logger("pipeline")
        self.state = PassState.IDLE

    @property
    def input(self) -> Path:
        return Path(self.config.input)  # type: ignore[arg-type]

    @property
    def output(self) -> Path:
        return Path(self.config.output)

    def run(self) -> PassResult:
        """Perform one pass and return its summary.

        Duplicate definitions and I/O errors propagate; the output file is only
        replaced once the whole registry has been validated and rendered.
        """
        start = time.perf_counter()
        self._transition(PassState.IDLE)
        registry = EndpointRegistry()
        result = PassResult(output=self.output, duration=0.0)

        try:
            self._transition(PassState.WALKING)
            for source in self.scanner.scan(self.input):
                result.files_scanned += 1
                outcome = match_annotations(source.text)
                if not isinstance(outcome, Matched):
                    self.logger.debug("Skipping %s: %s", source.path, outcome.reason.value)
                    result.skipped.append((str(source.path), outcome.reason))
                    continue

                self._transition(PassState.VALIDATING)
                match = outcome.match
                result.files_matched += 1
                for method in match.methods:
                    signature = render_signature(method.raw_params)
                    for raw in signature.dropped:
                        self.logger.debug(
                            "Dropping malformed parameter %r of %s.%s in %s",
                            raw,
                            match.group,
                            method.name,
                            source.path,
                        )
                    registry.add(match.group, method.name, signature, match.type_name)
                self._transition(PassState.WALKING)

            self._transition(PassState.EMITTING)
            self.emitter.emit(registry, self.output)
        except Exception:
            self._transition(PassState.FAILED)
            raise

        result.groups = len(registry.groups())
        result.methods = len(registry)
        result.duration = time.perf_counter() - start
        self._transition(PassState.DONE)
        self.logger.info("Finished in %s.", format_duration(result.duration))
        self.logger.debug(
            "Generated %d methods in %d groups from %d/%d files into %s",
            result.methods,
            result.groups,
            result.files_matched,
            result.files_scanned,
            result.output,
        )
        return result

    def _transition(self, state: PassState) -> None:
        if state is not self.state:
            self.logger.debug("Pass state %s -> %s", self.state.value, state.value)
        self.state = state


def run_once(config: IpcgenConfig) -> PassResult:
    """Convenience wrapper for a single pass."""
    return Generator(config).run()


__all__ = ["Generator", "format_duration", "run_once"]
