from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, override

from .agenda import Agenda

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..options_resolver import OptionsResolver
    from .agenda import XmlElement


class Storage(Agenda):
    """Storage tree: a storage with its own ordered substorages."""

    import_root: ClassVar[str] = "lst:itemStorage"

    def __init__(self, data: Mapping[str, object] | None = None, ico: str = "") -> None:
        super().__init__(data, ico)
        self._children: list[Storage] = []

    @property
    def children(self) -> tuple[Storage, ...]:
        return tuple(self._children)

    def add_child(self, storage: Storage) -> None:
        self._children.append(storage)

    @override
    def _build_xml(self) -> XmlElement:
        xml = self._create_element("str:storage", version="2.0")
        self.render_into(xml)
        return xml

    def render_into(self, parent: XmlElement) -> XmlElement:
        storage = self._add_child(
            parent,
            "str:itemStorage",
            code=self._data["code"],
            name=self._data.get("name"),
        )

        if self._children:
            substorages = self._add_child(storage, "str:subStorages")
            for child in self._children:
                child.render_into(substorages)

        return storage

    @override
    @classmethod
    def _configure_options(cls, resolver: OptionsResolver) -> None:
        # available options
        resolver.set_defined(["code", "name"])

        # validate / format options
        resolver.set_required("code")
