from typing import Protocol, runtime_checkable


@runtime_checkable
class LoggerPort(Protocol):
    pass

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def log_pack_opened(self, pack_id: str, target: str) -> None: ...

    def log_item_written(self, item_id: str, kind: str) -> None: ...

    def log_pack_closed(self, pack_id: str, item_count: int) -> None: ...

    def log_import_started(self, kind: str, source: str) -> None: ...

    def log_fragment_read(self, kind: str, index: int) -> None: ...

    def log_import_finished(self, kind: str, count: int) -> None: ...
