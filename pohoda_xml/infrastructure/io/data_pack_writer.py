"""Streaming writer for Pohoda data packs.

A data pack is the envelope document (``dat:dataPack``) that carries one
``dat:dataPackItem`` per agenda. Items are rendered, written and flushed one at
a time, so a session never holds more than the item being written. Output is
encoded in the fixed windows-1250 code page; characters outside it become
numeric character references.
"""

from __future__ import annotations

from enum import Enum
import io
import os
import re
from pathlib import Path
from typing import IO, TYPE_CHECKING, Literal, TypeAlias
import weakref
from xml.etree.ElementTree import Element
from xml.sax.saxutils import XMLGenerator

from ...constants import NAMESPACES, DataPackFormat, Defaults
from ...xml_utils import prefixes_by_uri, split_tag
from ..logging.null_logger import NullLogger
from .exceptions import (
    DocumentStateError,
    MalformedFragmentError,
    StreamOpenError,
    StreamWriteError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ...application.ports.services import LoggerPort
    from ...domain.entities.agenda import Agenda

Sink: TypeAlias = "str | os.PathLike[str] | IO[bytes]"
FragmentEvent: TypeAlias = (
    tuple[Literal["start"], str, dict[str, str]]
    | tuple[Literal["text"], str]
    | tuple[Literal["end"], str]
)


# Characters XML 1.0 does not allow, even as character references
_ILLEGAL_XML_CHARS = re.compile(
    r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


class WriterState(Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


def fragment_events(
    fragment: object, prefixes: Mapping[str, str] | None = None
) -> list[FragmentEvent]:
    """Flatten an agenda fragment into prefixed start/text/end events.

    The whole fragment is checked before anything is returned, so a fragment
    that cannot be written never produces partial output.

    Args:
        fragment: The element tree produced by ``Agenda.get_xml``
        prefixes: Namespace URI to prefix map (defaults to the data pack table)

    Raises:
        MalformedFragmentError: If the fragment is not an element tree, uses a
            namespace the data pack does not declare, has non-text attributes, or
            contains characters XML 1.0 does not allow
    """
    if not isinstance(fragment, Element):
        raise MalformedFragmentError(
            f"Expected an XML element fragment, got {type(fragment).__name__}"
        )
    events: list[FragmentEvent] = []
    _collect_events(fragment, prefixes or prefixes_by_uri(), events)
    return events


def _collect_events(
    element: Element, prefixes: Mapping[str, str], events: list[FragmentEvent]
) -> None:
    if not isinstance(element.tag, str):
        raise MalformedFragmentError(
            "Comments and processing instructions are not allowed in fragments"
        )
    name = _prefixed_name(element.tag, prefixes)
    attributes: dict[str, str] = {}
    for key, value in element.attrib.items():
        if not isinstance(value, str):
            raise MalformedFragmentError(
                f"Attribute {key!r} of <{name}> must be text, got {type(value).__name__}"
            )
        attributes[_prefixed_name(key, prefixes)] = _checked_text(
            value, f"attribute {key!r} of <{name}>"
        )

    events.append(("start", name, attributes))
    if element.text:
        events.append(("text", _checked_text(element.text, f"text of <{name}>")))
    for child in element:
        _collect_events(child, prefixes, events)
        if child.tail:
            events.append(("text", _checked_text(child.tail, f"text inside <{name}>")))
    events.append(("end", name))


def _checked_text(text: str, where: str) -> str:
    if (match := _ILLEGAL_XML_CHARS.search(text)) is not None:
        raise MalformedFragmentError(
            f"Character U+{ord(match.group()):04X} in {where} is not allowed in XML"
        )
    return text


def _prefixed_name(clark_name: str, prefixes: Mapping[str, str]) -> str:
    uri, local = split_tag(clark_name)
    if not local:
        raise MalformedFragmentError(f"Empty XML name in {clark_name!r}")
    if uri is None:
        return local
    if uri not in prefixes:
        raise MalformedFragmentError(f"Namespace {uri} is not declared in the data pack")
    return f"{prefixes[uri]}:{local}"


def _replay(generator: XMLGenerator, events: Iterable[FragmentEvent]) -> None:
    for event in events:
        match event:
            case ("start", name, attributes):
                generator.startElement(name, attributes)
            case ("text", text):
                generator.characters(text)
            case ("end", name):
                generator.endElement(name)


def _describe(target: object) -> str:
    if isinstance(target, (str, os.PathLike)):
        return str(target)
    return str(getattr(target, "name", type(target).__name__))


def _open_sink(sink: Sink) -> tuple[io.TextIOWrapper, bool]:
    if isinstance(sink, (str, os.PathLike)):
        path = Path(sink)
        try:
            handle: IO[bytes] = path.open("wb")
        except OSError as exc:
            raise StreamOpenError(f"Cannot open {path} for writing: {exc}") from exc
        owns_sink = True
    else:
        if sink.closed or not sink.writable():
            raise StreamOpenError(f"Sink {_describe(sink)} is not writable")
        handle = sink
        owns_sink = False

    stream = io.TextIOWrapper(
        handle,  # type: ignore[arg-type]
        encoding=DataPackFormat.ENCODING,
        errors="xmlcharrefreplace",
        newline="\n",
        write_through=True,
    )
    return stream, owns_sink


class DataPackWriter:
    """Write agendas as items of one ``dat:dataPack`` document.

    Lifecycle is ``open`` -> any number of ``add_item`` -> ``close``. Calls made
    outside that order raise ``DocumentStateError``.
    """

    def __init__(
        self,
        ico: str = Defaults.ICO,
        *,
        application: str = Defaults.APPLICATION,
        logger: LoggerPort | None = None,
    ) -> None:
        super().__init__()
        self.ico = ico
        self.application = application
        self.logger = logger or NullLogger()
        self._state = WriterState.UNOPENED
        self._stream: io.TextIOWrapper | None = None
        self._detach_sink: weakref.finalize | None = None
        self._generator: XMLGenerator | None = None
        self._prefixes = prefixes_by_uri()
        self._pack_id = ""
        self._item_count = 0

    @property
    def state(self) -> WriterState:
        return self._state

    @property
    def item_count(self) -> int:
        return self._item_count

    def open(self, sink: Sink, pack_id: str, note: str = Defaults.NOTE) -> None:
        """Start the data pack envelope on ``sink``.

        Args:
            sink: File path, or an open binary stream that stays owned by the caller
            pack_id: Data pack id
            note: Free-form note stored on the envelope

        Raises:
            StreamOpenError: If the sink cannot be acquired; the writer stays
                unopened and may be opened again with another sink
        """
        if self._state is not WriterState.UNOPENED:
            raise DocumentStateError(
                f"Cannot open a data pack writer that is {self._state.value}"
            )

        stream, owns_sink = _open_sink(sink)
        self._stream = stream
        if not owns_sink:
            # Discarding the writer must not close the caller's stream
            self._detach_sink = weakref.finalize(self, stream.detach)

        attributes = {
            "id": pack_id,
            "ico": self.ico,
            "application": self.application,
            "version": DataPackFormat.VERSION,
            "note": note,
        }
        for prefix, uri in NAMESPACES.items():
            attributes[f"xmlns:{prefix}"] = uri

        generator = XMLGenerator(
            stream, encoding=DataPackFormat.ENCODING, short_empty_elements=False
        )
        try:
            generator.startDocument()
            generator.startElement(DataPackFormat.ROOT, attributes)
            stream.flush()
        except (OSError, ValueError) as exc:
            self._release()
            raise StreamOpenError(
                f"Cannot start data pack on {_describe(sink)}: {exc}"
            ) from exc

        self._generator = generator
        self._pack_id = pack_id
        self._item_count = 0
        self._state = WriterState.OPEN
        self.logger.log_pack_opened(pack_id, _describe(sink))

    def add_item(self, item_id: str, agenda: Agenda) -> None:
        """Render ``agenda`` and append it as one flushed ``dat:dataPackItem``."""
        generator = self._require_open("add an item to")
        events = fragment_events(agenda.get_xml(), self._prefixes)

        try:
            generator.startElement(
                DataPackFormat.ITEM,
                {"id": item_id, "version": DataPackFormat.VERSION},
            )
            _replay(generator, events)
            generator.endElement(DataPackFormat.ITEM)
            self._flush()
        except (OSError, ValueError) as exc:
            raise StreamWriteError(f"Failed to write item {item_id}: {exc}") from exc

        self._item_count += 1
        self.logger.log_item_written(item_id, agenda.kind())

    def close(self) -> None:
        generator = self._require_open("close")
        try:
            generator.endElement(DataPackFormat.ROOT)
            generator.endDocument()
        except (OSError, ValueError) as exc:
            raise StreamWriteError(
                f"Failed to close data pack {self._pack_id}: {exc}"
            ) from exc
        finally:
            self._state = WriterState.CLOSED
            self._release()
        self.logger.log_pack_closed(self._pack_id, self._item_count)

    def __enter__(self) -> DataPackWriter:
        return self

    def __exit__(self, exc_type: object, exc: object, traceback: object) -> None:
        if self._state is not WriterState.OPEN:
            return
        if exc_type is None:
            self.close()
        else:
            # Abandoned session: release the sink without finishing the envelope
            self._state = WriterState.CLOSED
            self._release()

    def _require_open(self, action: str) -> XMLGenerator:
        if self._state is not WriterState.OPEN or self._generator is None:
            raise DocumentStateError(
                f"Cannot {action} a data pack that is {self._state.value}"
            )
        return self._generator

    def _flush(self) -> None:
        if self._stream is not None:
            self._stream.flush()

    def _release(self) -> None:
        stream, self._stream = self._stream, None
        self._generator = None
        if stream is None:
            return
        detach_sink, self._detach_sink = self._detach_sink, None
        if detach_sink is not None:
            detach_sink()
        else:
            stream.close()
