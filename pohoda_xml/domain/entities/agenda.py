"""Base contract shared by every agenda kind.

An agenda is one vendor record type (storage, invoice, order, ...). Its
attributes are validated once, at construction, against the option contract
the concrete kind declares in ``_configure_options``; an agenda in an invalid
state cannot be built at all.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar, TypeAlias
from xml.etree import ElementTree as ET
from xml.etree.ElementTree import Element

from ...xml_utils import format_value, qualify
from ..exceptions import ValidationError
from ..options_resolver import OptionsResolver, OptionsResolverError

if TYPE_CHECKING:
    XmlElement: TypeAlias = Element[str]
else:
    XmlElement: TypeAlias = Element


class Agenda(ABC):
    import_root: ClassVar[str]

    def __init__(self, data: Mapping[str, object] | None = None, ico: str = "") -> None:
        super().__init__()
        resolver = type(self).option_contract()
        try:
            resolved = resolver.resolve(dict(data or {}))
        except OptionsResolverError as exc:
            raise ValidationError(type(self).__name__, str(exc)) from exc
        self._data: dict[str, object] = resolved
        self._ico = ico

    @classmethod
    def kind(cls) -> str:
        return cls.__name__

    @classmethod
    def option_contract(cls) -> OptionsResolver:
        resolver = OptionsResolver(cls.kind())
        cls._configure_options(resolver)
        return resolver

    @property
    def data(self) -> Mapping[str, object]:
        return MappingProxyType(self._data)

    @property
    def ico(self) -> str:
        return self._ico

    def get_xml(self) -> XmlElement:
        """Render the agenda as a namespace-qualified element tree.

        Raises:
            ValidationError: If a required attribute is missing
        """
        missing = type(self).option_contract().required - set(self._data)
        if missing:
            raise ValidationError(
                self.kind(), f"required option(s) {', '.join(sorted(missing))} are missing"
            )
        return self._build_xml()

    @abstractmethod
    def _build_xml(self) -> XmlElement: ...

    @classmethod
    @abstractmethod
    def _configure_options(cls, resolver: OptionsResolver) -> None: ...

    @staticmethod
    def _create_element(tag: str, /, **attributes: object) -> XmlElement:
        element = ET.Element(qualify(tag))
        Agenda._set_attributes(element, attributes)
        return element

    @staticmethod
    def _add_child(
        parent: XmlElement, tag: str, /, **attributes: object
    ) -> XmlElement:
        element = ET.SubElement(parent, qualify(tag))
        Agenda._set_attributes(element, attributes)
        return element

    @staticmethod
    def _set_attributes(element: XmlElement, attributes: Mapping[str, object]) -> None:
        for key, value in attributes.items():
            formatted = format_value(value)
            if formatted is not None:
                element.set(key, formatted)
