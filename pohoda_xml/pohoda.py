"""Entry point bound to one organization.

``Pohoda`` ties the agenda registry, the data pack writer and the response
reader together for a single organization code (IČO). One export session
(``open`` -> ``add_item`` ... -> ``close``) and one import session
(``load`` -> ``next`` ...) can be run per instance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import Defaults
from .domain.registry import EntityFactory
from .infrastructure.io.data_pack_reader import DataPackReader
from .infrastructure.io.data_pack_writer import DataPackWriter
from .infrastructure.logging.null_logger import NullLogger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .application.ports.services import LoggerPort
    from .config import PohodaConfig
    from .domain.entities.agenda import Agenda
    from .infrastructure.io.data_pack_reader import Source, XmlElement
    from .infrastructure.io.data_pack_writer import Sink


class Pohoda:
    pass

    def __init__(
        self,
        ico: str,
        *,
        application: str = Defaults.APPLICATION,
        registry: Mapping[str, type[Agenda]] | None = None,
        logger: LoggerPort | None = None,
    ) -> None:
        super().__init__()
        self.ico = ico
        self.logger = logger or NullLogger()
        self.factory = EntityFactory(ico, registry)
        self.writer = DataPackWriter(ico, application=application, logger=self.logger)
        self.reader = DataPackReader(self.factory, logger=self.logger)

    @classmethod
    def from_config(cls, config: PohodaConfig, logger: LoggerPort | None = None) -> Pohoda:
        return cls(config.ico, application=config.application, logger=logger)

    def create(self, kind: str, data: Mapping[str, object] | None = None) -> Agenda:
        return self.factory.create(kind, data)

    def open(self, sink: Sink, pack_id: str, note: str = Defaults.NOTE) -> None:
        self.writer.open(sink, pack_id, note)

    def add_item(self, item_id: str, agenda: Agenda) -> None:
        self.writer.add_item(item_id, agenda)

    def close(self) -> None:
        self.writer.close()

    def load(self, kind: str, source: Source) -> None:
        self.reader.open(source, kind)

    def next(self) -> XmlElement | None:
        return self.reader.next()
