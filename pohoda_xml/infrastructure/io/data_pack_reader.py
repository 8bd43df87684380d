"""Streaming reader for Pohoda response documents.

The reader scans a document for the import root of one agenda kind (for
storages ``lst:itemStorage``) and hands out that element and each following
sibling of the same name as an isolated element tree. Everything already
scanned past is detached from the parsed tree, so memory stays bounded by a
single item regardless of document size.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
import os
from pathlib import Path
from typing import IO, TYPE_CHECKING, Literal, TypeAlias
from xml.etree import ElementTree as ET
from xml.etree.ElementTree import Element

from ...domain.registry import EntityFactory
from ...xml_utils import qualify
from ..logging.null_logger import NullLogger
from .exceptions import DocumentStateError, MalformedFragmentError, StreamOpenError

if TYPE_CHECKING:
    from ...application.ports.services import LoggerPort

    XmlElement: TypeAlias = Element[str]
else:
    XmlElement: TypeAlias = Element

Source: TypeAlias = "str | os.PathLike[str] | IO[bytes]"


class ReaderState(Enum):
    UNOPENED = "unopened"
    POSITIONED = "positioned"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True, slots=True)
class XmlToken:
    event: Literal["start", "end"]
    element: XmlElement
    depth: int
    parent: XmlElement | None


class XmlTokenCursor:
    """Forward-only cursor over the start/end tokens of an XML byte stream.

    ``depth`` is the number of open ancestors: the document element starts and
    ends at depth 0, its children at depth 1 and so on.
    """

    def __init__(self, source: IO[bytes]) -> None:
        super().__init__()
        self._events = ET.iterparse(source, events=("start", "end"))
        self._open: list[XmlElement] = []

    def __iter__(self) -> Iterator[XmlToken]:
        return self

    def __next__(self) -> XmlToken:
        try:
            event, element = next(self._events)
        except ET.ParseError as exc:
            raise MalformedFragmentError(f"Malformed XML document: {exc}") from exc

        if event == "start":
            parent = self._open[-1] if self._open else None
            token = XmlToken("start", element, len(self._open), parent)
            self._open.append(element)
            return token

        self._open.pop()
        parent = self._open[-1] if self._open else None
        return XmlToken("end", element, len(self._open), parent)

    @staticmethod
    def release(token: XmlToken) -> None:
        """Detach a finished element from its parent."""
        if token.parent is not None:
            token.parent.remove(token.element)


def _describe(source: object) -> str:
    if isinstance(source, (str, os.PathLike)):
        return str(source)
    return str(getattr(source, "name", type(source).__name__))


def _open_source(source: Source) -> tuple[IO[bytes], bool]:
    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        try:
            return path.open("rb"), True
        except OSError as exc:
            raise StreamOpenError(f"Cannot open {path} for reading: {exc}") from exc
    if source.closed or not source.readable():
        raise StreamOpenError(f"Source {_describe(source)} is not readable")
    return source, False


class DataPackReader:
    """Read the items of one agenda kind out of a response document.

    Usage::

        reader = DataPackReader()
        reader.open("response.xml", "Storage")
        while (fragment := reader.next()) is not None:
            ...
    """

    def __init__(
        self,
        factory: EntityFactory | None = None,
        *,
        logger: LoggerPort | None = None,
    ) -> None:
        super().__init__()
        self.factory = factory or EntityFactory()
        self.logger = logger or NullLogger()
        self._state = ReaderState.UNOPENED
        self._kind = ""
        self._handle: IO[bytes] | None = None
        self._owns_source = False
        self._cursor: XmlTokenCursor | None = None
        self._current: XmlToken | None = None
        self._count = 0

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def kind(self) -> str:
        return self._kind

    def open(self, source: Source, kind: str) -> None:
        """Position the reader on the first ``kind`` item of ``source``.

        Reaching the end of the document without a match is not an error;
        the reader is then exhausted and ``next`` returns ``None``.

        Raises:
            UnknownEntityKindError: If ``kind`` is not registered (no I/O happens)
            StreamOpenError: If the source cannot be opened
            MalformedFragmentError: If the document is not well-formed XML
        """
        if self._state is not ReaderState.UNOPENED:
            raise DocumentStateError(
                f"Cannot open a data pack reader that is {self._state.value}"
            )

        root_tag = qualify(self.factory.resolve(kind).import_root)
        handle, owns_source = _open_source(source)

        self._handle = handle
        self._owns_source = owns_source
        self._kind = kind
        self._count = 0
        self._cursor = XmlTokenCursor(handle)
        self.logger.log_import_started(kind, _describe(source))

        try:
            self._seek_first(root_tag)
        except MalformedFragmentError:
            self._finish()
            raise

    def next(self) -> XmlElement | None:
        """Return the current item and advance to its next sibling.

        Returns:
            The item as a detached element tree, or ``None`` once exhausted
        """
        if self._state is ReaderState.UNOPENED:
            raise DocumentStateError("Cannot read from a data pack reader that is unopened")
        if self._state is ReaderState.EXHAUSTED:
            return None

        try:
            fragment = self._capture()
            self._count += 1
            self.logger.log_fragment_read(self._kind, self._count)
            self._seek_sibling()
        except MalformedFragmentError:
            self._finish()
            raise
        return fragment

    def close(self) -> None:
        if self._state is ReaderState.POSITIONED:
            self._finish()

    def __iter__(self) -> Iterator[XmlElement]:
        while (fragment := self.next()) is not None:
            yield fragment

    def __enter__(self) -> DataPackReader:
        return self

    def __exit__(self, exc_type: object, exc: object, traceback: object) -> None:
        self.close()

    def _seek_first(self, root_tag: str) -> None:
        assert self._cursor is not None
        for token in self._cursor:
            if token.event == "start":
                if token.element.tag == root_tag:
                    self._current = token
                    self._state = ReaderState.POSITIONED
                    return
            else:
                self._cursor.release(token)
        self._finish()

    def _capture(self) -> XmlElement:
        assert self._cursor is not None and self._current is not None
        current = self._current.element
        for token in self._cursor:
            if token.event == "end" and token.element is current:
                self._cursor.release(token)
                return current
        raise MalformedFragmentError(f"Document ended inside <{current.tag}>")

    def _seek_sibling(self) -> None:
        # Siblings share the depth and the tag of the first matched item.
        assert self._cursor is not None and self._current is not None
        depth = self._current.depth
        root_tag = self._current.element.tag
        for token in self._cursor:
            if token.event == "start":
                if token.depth == depth and token.element.tag == root_tag:
                    self._current = token
                    return
            elif token.depth < depth:
                break
            elif token.depth == depth:
                self._cursor.release(token)
        self._finish()

    def _finish(self) -> None:
        handle, self._handle = self._handle, None
        self._cursor = None
        self._current = None
        if self._state is not ReaderState.EXHAUSTED:
            self._state = ReaderState.EXHAUSTED
            self.logger.log_import_finished(self._kind, self._count)
        if handle is not None and self._owns_source:
            handle.close()
