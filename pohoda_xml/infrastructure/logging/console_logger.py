from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import override

from rich.console import Console
from rich.markup import escape

from ...application.ports.services import LoggerPort


class LogLevel(IntEnum):
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


@dataclass(slots=True)
class LogContext:
    pack_id: str = ""
    kind: str = ""
    operation: str = ""
    start_time: datetime = field(default_factory=datetime.now)

    def elapsed_ms(self) -> float:
        return (datetime.now() - self.start_time).total_seconds() * 1000


def _empty_stats() -> dict[str, int]:
    return {
        "items_written": 0,
        "fragments_read": 0,
        "warnings": 0,
        "errors": 0,
    }


class ConsoleLogger(LoggerPort):
    pass

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        super().__init__()
        self.console = console or Console()
        self.verbosity = verbosity
        self._context: LogContext | None = None
        self._stats: dict[str, int] = _empty_stats()

    def set_context(self, **kwargs: str) -> None:
        if self._context is None:
            self._context = LogContext()
        for key, value in kwargs.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

    def clear_context(self) -> None:
        self._context = None

    @override
    def info(self, message: str, *, level: int = LogLevel.NORMAL) -> None:
        if self.verbosity >= level:
            prefix = self._get_prefix()
            self.console.print(f"{prefix}{message}")

    @override
    def verbose(self, message: str) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            prefix = self._get_prefix()
            self.console.print(f"[dim]{prefix}{message}[/dim]")

    @override
    def debug(self, message: str) -> None:
        if self.verbosity >= LogLevel.DEBUG:
            prefix = self._get_prefix()
            self.console.print(f"[dim cyan]{prefix}{message}[/dim cyan]")

    @override
    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    @override
    def warning(self, message: str) -> None:
        self._stats["warnings"] += 1
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    @override
    def error(self, message: str) -> None:
        self._stats["errors"] += 1
        self.console.print(f"[red]✗[/red] {message}")

    @override
    def log_pack_opened(self, pack_id: str, target: str) -> None:
        self.set_context(pack_id=pack_id, operation="export")
        self.verbose(f"Opened data pack {pack_id} for writing: {escape(target)}")

    @override
    def log_item_written(self, item_id: str, kind: str) -> None:
        self._stats["items_written"] += 1
        self.debug(f"  Wrote item {item_id} ({kind})")

    @override
    def log_pack_closed(self, pack_id: str, item_count: int) -> None:
        msg = f"Closed data pack {pack_id} ({item_count:,} items)"
        if self._context is not None and self.verbosity >= LogLevel.DEBUG:
            msg += f" in {self._context.elapsed_ms():.1f} ms"
        self.verbose(msg)
        self.clear_context()

    @override
    def log_import_started(self, kind: str, source: str) -> None:
        self.set_context(kind=kind, operation="import")
        self.verbose(f"Reading {kind} items from {escape(source)}")

    @override
    def log_fragment_read(self, kind: str, index: int) -> None:
        self._stats["fragments_read"] += 1
        self.debug(f"  Read {kind} item #{index}")

    @override
    def log_import_finished(self, kind: str, count: int) -> None:
        self.verbose(f"Finished reading {kind}: {count:,} items")
        self.clear_context()

    def log_final_stats(self) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            self.console.print()
            self.console.print("[dim]Session Statistics:[/dim]")
            self.console.print(
                f"[dim]  Items written: {self._stats['items_written']:,}[/dim]"
            )
            self.console.print(
                f"[dim]  Items read: {self._stats['fragments_read']:,}[/dim]"
            )
            if self._stats["warnings"] > 0:
                self.console.print(
                    f"[dim yellow]  Warnings: {self._stats['warnings']}[/dim yellow]"
                )
            if self._stats["errors"] > 0:
                self.console.print(
                    f"[dim red]  Errors: {self._stats['errors']}[/dim red]"
                )

    def get_stats(self) -> dict[str, int]:
        return self._stats.copy()

    def reset_stats(self) -> None:
        self._stats = _empty_stats()

    def _get_prefix(self) -> str:
        if self._context is None or self.verbosity < LogLevel.DEBUG:
            return ""
        parts: list[str] = []
        if self._context.operation:
            parts.append(self._context.operation)
        if self._context.pack_id:
            parts.append(self._context.pack_id)
        if self._context.kind:
            parts.append(self._context.kind)
        return escape(f"[{':'.join(parts)}] ") if parts else ""
