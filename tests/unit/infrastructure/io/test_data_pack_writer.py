"""Unit tests for DataPackWriter."""

from __future__ import annotations

import gc
from io import BytesIO
from pathlib import Path
from typing import ClassVar
from xml.etree import ElementTree as ET

import pytest

from pohoda_xml.constants import NAMESPACES
from pohoda_xml.domain import Agenda, Storage, ValidationError
from pohoda_xml.domain.options_resolver import OptionsResolver
from pohoda_xml.infrastructure.io import (
    DataPackWriter,
    DocumentStateError,
    MalformedFragmentError,
    StreamOpenError,
    StreamWriteError,
    WriterState,
    fragment_events,
)

DAT = NAMESPACES["dat"]
STR = NAMESPACES["str"]


class ForeignAgenda(Agenda):
    """Agenda rendering into a namespace the data pack does not declare."""

    import_root: ClassVar[str] = "foreign"

    def _build_xml(self):
        root = ET.Element("{urn:example:foreign}thing")
        ET.SubElement(root, "{urn:example:foreign}part")
        return root

    @classmethod
    def _configure_options(cls, resolver: OptionsResolver) -> None:
        resolver.set_defined([])


class TextAgenda(Agenda):
    import_root: ClassVar[str] = "lst:itemStorage"

    def _build_xml(self):
        root = self._create_element("str:storage", version="2.0")
        note = self._add_child(root, "str:note")
        note.text = self._data["text"]
        return root

    @classmethod
    def _configure_options(cls, resolver: OptionsResolver) -> None:
        resolver.set_required("text")


class FailingSink(BytesIO):
    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def write(self, data):  # type: ignore[override]
        if self.fail:
            raise OSError("disk full")
        return super().write(data)


def _parse(sink: BytesIO) -> ET.Element:
    return ET.fromstring(sink.getvalue())


@pytest.fixture
def writer() -> DataPackWriter:
    return DataPackWriter("12345678")


class TestOpen:
    def test_xml_declaration_uses_windows_1250(self, writer, sink):
        writer.open(sink, "001")
        writer.close()

        assert sink.getvalue().startswith(
            b'<?xml version="1.0" encoding="windows-1250"?>\n'
        )

    def test_envelope_attributes(self, writer, sink):
        writer.open(sink, "001", "Export from shop")
        writer.close()

        root = _parse(sink)
        assert root.tag == f"{{{DAT}}}dataPack"
        assert root.attrib == {
            "id": "001",
            "ico": "12345678",
            "application": "Rshop Pohoda connector",
            "version": "2.0",
            "note": "Export from shop",
        }

    def test_all_namespaces_declared(self, writer, sink):
        writer.open(sink, "001")
        writer.close()

        text = sink.getvalue().decode("cp1250")
        for prefix, uri in NAMESPACES.items():
            assert f'xmlns:{prefix}="{uri}"' in text

    def test_attribute_order(self, writer, sink):
        writer.open(sink, "001")
        writer.close()

        text = sink.getvalue().decode("cp1250")
        assert text.index('id="001"') < text.index('ico="12345678"')
        assert text.index('note=""') < text.index("xmlns:adb=")

    def test_custom_application(self, sink):
        writer = DataPackWriter("1", application="Shop sync")
        writer.open(sink, "001")
        writer.close()

        assert _parse(sink).get("application") == "Shop sync"

    def test_open_unwritable_path(self, writer, tmp_path: Path):
        target = tmp_path / "missing" / "out.xml"

        with pytest.raises(StreamOpenError):
            writer.open(target, "001")

        assert writer.state is WriterState.UNOPENED

    def test_retry_after_failed_open(self, writer, tmp_path: Path, sink):
        with pytest.raises(StreamOpenError):
            writer.open(tmp_path / "missing" / "out.xml", "001")

        writer.open(sink, "001")
        writer.close()

        assert writer.state is WriterState.CLOSED

    def test_open_closed_stream(self, writer):
        stream = BytesIO()
        stream.close()

        with pytest.raises(StreamOpenError):
            writer.open(stream, "001")

    def test_start_tag_is_complete_after_open(self, writer, tmp_path: Path):
        target = tmp_path / "out.xml"
        writer.open(target, "001")

        assert target.read_bytes().endswith(f'xmlns:vyd="{NAMESPACES["vyd"]}">'.encode())
        writer.close()

    def test_open_twice(self, writer, sink):
        writer.open(sink, "001")

        with pytest.raises(DocumentStateError):
            writer.open(BytesIO(), "002")


class TestAddItem:
    def test_scenario_single_storage(self, writer, sink):
        writer.open(sink, "001", "")
        writer.add_item("1", Storage({"code": "A"}))
        writer.close()

        root = _parse(sink)
        items = root.findall(f"{{{DAT}}}dataPackItem")
        assert len(items) == 1
        assert items[0].attrib == {"id": "1", "version": "2.0"}

        (payload,) = list(items[0])
        assert payload.tag == f"{{{STR}}}storage"
        (storage,) = list(payload)
        assert storage.get("code") == "A"
        assert storage.find(f"{{{STR}}}subStorages") is None

    def test_items_keep_order(self, writer, sink):
        writer.open(sink, "001")
        for code in ("C", "A", "B"):
            writer.add_item(code.lower(), Storage({"code": code}))
        writer.close()

        items = _parse(sink).findall(f"{{{DAT}}}dataPackItem")
        assert [item.get("id") for item in items] == ["c", "a", "b"]
        assert writer.item_count == 3

    def test_item_is_flushed_before_return(self, writer, tmp_path: Path):
        target = tmp_path / "out.xml"
        writer.open(target, "001")
        writer.add_item("1", Storage({"code": "A"}))

        written = target.read_bytes()
        assert written.endswith(b"</dat:dataPackItem>")
        writer.close()

    def test_prefixes_come_from_envelope(self, writer, sink, storage_tree):
        """Fragments reuse the envelope declarations instead of redeclaring them."""
        writer.open(sink, "001")
        writer.add_item("1", storage_tree)
        writer.close()

        text = sink.getvalue().decode("cp1250")
        assert text.count("xmlns:str=") == 1
        assert '<str:itemStorage code="MAIN" name="Main storage">' in text
        assert "<str:subStorages>" in text

    def test_characters_outside_code_page(self, writer, sink):
        writer.open(sink, "001")
        writer.add_item("1", Storage({"code": "A", "name": "Sklad č. 1 ✓"}))
        writer.close()

        data = sink.getvalue()
        assert "č".encode("cp1250") in data
        assert b"&#10003;" in data
        storage = _parse(sink).find(f".//{{{STR}}}itemStorage")
        assert storage.get("name") == "Sklad č. 1 ✓"

    def test_markup_is_escaped(self, writer, sink):
        writer.open(sink, "001")
        writer.add_item("1", TextAgenda({"text": "a < b & \"c\""}))
        writer.close()

        note = _parse(sink).find(f".//{{{STR}}}note")
        assert note.text == 'a < b & "c"'

    def test_undeclared_namespace_writes_nothing(self, writer, sink):
        writer.open(sink, "001")
        writer.add_item("1", Storage({"code": "A"}))
        before = sink.getvalue()

        with pytest.raises(MalformedFragmentError, match="urn:example:foreign"):
            writer.add_item("2", ForeignAgenda({}))

        assert sink.getvalue() == before
        assert writer.item_count == 1

    def test_illegal_attribute_character_writes_nothing(self, writer, sink):
        writer.open(sink, "001")
        before = sink.getvalue()

        with pytest.raises(MalformedFragmentError, match="U\\+0001"):
            writer.add_item("1", Storage({"code": "A\x01"}))

        assert sink.getvalue() == before
        writer.close()
        assert list(_parse(sink)) == []

    def test_illegal_text_character(self, writer, sink):
        writer.open(sink, "001")

        with pytest.raises(MalformedFragmentError, match="U\\+000B"):
            writer.add_item("1", TextAgenda({"text": "line\x0bbreak"}))

        assert writer.item_count == 0

    def test_add_before_open(self, writer):
        with pytest.raises(DocumentStateError):
            writer.add_item("1", Storage({"code": "A"}))

    def test_add_after_close(self, writer, sink):
        writer.open(sink, "001")
        writer.close()

        with pytest.raises(DocumentStateError):
            writer.add_item("1", Storage({"code": "A"}))

    def test_write_failure(self, writer):
        sink = FailingSink()
        writer.open(sink, "001")
        sink.fail = True

        with pytest.raises(StreamWriteError, match="disk full"):
            writer.add_item("1", Storage({"code": "A"}))


class TestClose:
    def test_empty_pack(self, writer, sink):
        writer.open(sink, "001")
        writer.close()

        root = _parse(sink)
        assert list(root) == []
        assert root.get("id") == "001"
        assert root.get("ico") == "12345678"
        assert writer.state is WriterState.CLOSED

    def test_close_twice(self, writer, sink):
        writer.open(sink, "001")
        writer.close()

        with pytest.raises(DocumentStateError):
            writer.close()

    def test_close_before_open(self, writer):
        with pytest.raises(DocumentStateError):
            writer.close()

    def test_caller_stream_stays_open(self, writer, sink):
        writer.open(sink, "001")
        writer.close()

        assert not sink.closed

    def test_discarded_writer_leaves_caller_stream_open(self, sink):
        writer = DataPackWriter("1")
        writer.open(sink, "001")
        writer.add_item("1", Storage({"code": "A"}))

        del writer
        gc.collect()

        assert not sink.closed
        assert sink.getvalue().endswith(b"</dat:dataPackItem>")

    def test_writer_discarded_after_write_failure(self):
        sink = FailingSink()
        writer = DataPackWriter("1")
        writer.open(sink, "001")
        sink.fail = True
        with pytest.raises(StreamWriteError):
            writer.add_item("1", Storage({"code": "A"}))
        sink.fail = False

        del writer
        gc.collect()

        assert not sink.closed

    def test_path_sink_is_closed(self, writer, tmp_path: Path):
        target = tmp_path / "out.xml"
        writer.open(target, "001")
        writer.add_item("1", Storage({"code": "A"}))
        writer.close()

        root = ET.parse(target).getroot()
        assert len(root.findall(f"{{{DAT}}}dataPackItem")) == 1


class TestContextManager:
    def test_closes_on_exit(self, sink):
        with DataPackWriter("1") as writer:
            writer.open(sink, "001")
            writer.add_item("1", Storage({"code": "A"}))

        assert writer.state is WriterState.CLOSED
        assert len(_parse(sink)) == 1

    def test_abandons_on_error(self, sink):
        with pytest.raises(ValidationError):
            with DataPackWriter("1") as writer:
                writer.open(sink, "001")
                writer.add_item("1", Storage({"code": "A"}))
                writer.add_item("2", Storage({"name": "missing code"}))

        assert writer.state is WriterState.CLOSED
        assert not sink.getvalue().endswith(b"</dat:dataPack>")


class TestFragmentEvents:
    def test_events(self):
        events = fragment_events(Storage({"code": "A"}).get_xml())

        assert events == [
            ("start", "str:storage", {"version": "2.0"}),
            ("start", "str:itemStorage", {"code": "A"}),
            ("end", "str:itemStorage"),
            ("end", "str:storage"),
        ]

    def test_rejects_non_element(self):
        with pytest.raises(MalformedFragmentError):
            fragment_events("<str:storage/>")

    def test_rejects_comments(self):
        root = ET.Element(f"{{{STR}}}storage")
        root.append(ET.Comment("note"))

        with pytest.raises(MalformedFragmentError):
            fragment_events(root)

    def test_rejects_non_text_attribute(self):
        root = ET.Element(f"{{{STR}}}storage", code=1)  # type: ignore[arg-type]

        with pytest.raises(MalformedFragmentError, match="code"):
            fragment_events(root)

    def test_rejects_illegal_character_in_tail(self):
        root = ET.Element(f"{{{STR}}}storage")
        child = ET.SubElement(root, f"{{{STR}}}note")
        child.tail = "\x1f"

        with pytest.raises(MalformedFragmentError, match="U\\+001F"):
            fragment_events(root)

    def test_keeps_allowed_whitespace_and_astral_characters(self):
        root = ET.Element(f"{{{STR}}}storage", name="a\tb")
        root.text = "line\r\nnext \U0001F4E6"

        events = fragment_events(root)

        assert events[0] == ("start", "str:storage", {"name": "a\tb"})
        assert events[1] == ("text", "line\r\nnext \U0001F4E6")
