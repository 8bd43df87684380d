from .agenda import Agenda
from .storage import Storage

__all__ = ["Agenda", "Storage"]
