from typing import override

from ...application.ports.services import LoggerPort


class NullLogger(LoggerPort):
    pass

    @override
    def info(self, message: str) -> None:
        return

    @override
    def success(self, message: str) -> None:
        return

    @override
    def warning(self, message: str) -> None:
        return

    @override
    def error(self, message: str) -> None:
        return

    @override
    def debug(self, message: str) -> None:
        return

    @override
    def verbose(self, message: str) -> None:
        return

    @override
    def log_pack_opened(self, pack_id: str, target: str) -> None:
        return None

    @override
    def log_item_written(self, item_id: str, kind: str) -> None:
        return None

    @override
    def log_pack_closed(self, pack_id: str, item_count: int) -> None:
        return None

    @override
    def log_import_started(self, kind: str, source: str) -> None:
        return None

    @override
    def log_fragment_read(self, kind: str, index: int) -> None:
        return None

    @override
    def log_import_finished(self, kind: str, count: int) -> None:
        return None
