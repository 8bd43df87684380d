"""Pohoda XML connector.

This package converts business records ("agendas") to and from the XML data
pack format used to exchange data with the Pohoda accounting application.

Features:
- Declared, validated option contracts per agenda kind
- Composite agendas (storage trees) rendered to namespaced XML fragments
- Streaming data pack writer (windows-1250, one flushed item at a time)
- Streaming response reader yielding one item element at a time
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover
    __version__ = version("pohoda-xml")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# Core exports
from pohoda_xml.config import ConfigLoader, PohodaConfig
from pohoda_xml.constants import NAMESPACES
from pohoda_xml.domain import (
    Agenda,
    EntityFactory,
    Storage,
    UnknownEntityKindError,
    ValidationError,
)
from pohoda_xml.infrastructure.io import (
    DataPackReader,
    DataPackWriter,
    DocumentStateError,
    MalformedFragmentError,
    StreamOpenError,
    StreamWriteError,
)
from pohoda_xml.pohoda import Pohoda

__all__ = [
    "__version__",
    # Facade
    "Pohoda",
    # Agendas
    "Agenda",
    "EntityFactory",
    "Storage",
    # Data packs
    "DataPackReader",
    "DataPackWriter",
    "NAMESPACES",
    # Configuration
    "ConfigLoader",
    "PohodaConfig",
    # Errors
    "DocumentStateError",
    "MalformedFragmentError",
    "StreamOpenError",
    "StreamWriteError",
    "UnknownEntityKindError",
    "ValidationError",
]
