from .services import LoggerPort

__all__ = ["LoggerPort"]
