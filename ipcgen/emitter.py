"""Rendering and writing of the generated IPC client module."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .logging import get_logger
from .registry import EndpointRegistry

DEFAULT_TEMPLATE = "api.ts.j2"

_LOGGER = get_logger("emitter")


class ModuleEmitter:
    """Renders an EndpointRegistry through a Jinja2 template."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        template_name: str = DEFAULT_TEMPLATE,
    ) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.template_name = template_name
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, registry: EndpointRegistry) -> str:
        template = self._env.get_template(self.template_name)
        return template.render(groups=registry.groups())

    def emit(self, registry: EndpointRegistry, output: Path) -> Path:
        """Render the registry and replace `output` with the result."""
        return write_module(self.render(registry), output)


def render_module(registry: EndpointRegistry) -> str:
    """Render the registry with the bundled template."""
    return ModuleEmitter().render(registry)


def _target_mode(output: Path) -> int:
    """Keep an existing output's mode; new files get 0o666 minus the umask."""
    try:
        return stat.S_IMODE(output.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_module(text: str, output: Path) -> Path:
    """Write `text` to `output` through a sibling temp file and an atomic rename.

    On failure the previous output is left untouched and the temp file removed.
    """
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    tmp_name = ""
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=str(output.parent),
            prefix=f".{output.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, _target_mode(output))
        os.replace(tmp_name, output)
    except OSError:
        if tmp_name:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
        raise
    _LOGGER.debug("Wrote %d bytes to %s", len(text.encode("utf-8")), output)
    return output


__all__ = ["DEFAULT_TEMPLATE", "ModuleEmitter", "render_module", "write_module"]
