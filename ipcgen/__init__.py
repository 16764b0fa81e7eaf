"""Generate Electron IPC client modules from annotated TypeScript sources."""

__version__ = "0.1.0"
