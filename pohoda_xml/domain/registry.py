"""Agenda kind registry and lookup.

Kinds are wired in here, and only here. Lookup is by exact kind name against
a closed mapping; there is no discovery of agenda classes at runtime.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from .entities.storage import Storage
from .exceptions import UnknownEntityKindError

if TYPE_CHECKING:
    from .entities.agenda import Agenda


AGENDA_TYPES: Mapping[str, type[Agenda]] = MappingProxyType(
    {
        "Storage": Storage,
    }
)


def get_agenda_type(
    kind: str, registry: Mapping[str, type[Agenda]] = AGENDA_TYPES
) -> type[Agenda]:
    try:
        return registry[kind]
    except KeyError:
        raise UnknownEntityKindError(kind) from None


class EntityFactory:
    pass

    def __init__(
        self, ico: str = "", registry: Mapping[str, type[Agenda]] | None = None
    ) -> None:
        super().__init__()
        self.ico = ico
        self._registry: Mapping[str, type[Agenda]] = MappingProxyType(
            dict(AGENDA_TYPES if registry is None else registry)
        )

    @property
    def kinds(self) -> tuple[str, ...]:
        return tuple(sorted(self._registry))

    def resolve(self, kind: str) -> type[Agenda]:
        return get_agenda_type(kind, self._registry)

    def create(self, kind: str, data: Mapping[str, object] | None = None) -> Agenda:
        """Build an agenda of ``kind`` owned by this factory's organization.

        Raises:
            UnknownEntityKindError: If ``kind`` is not registered
            ValidationError: If ``data`` breaks the kind's option contract
        """
        return self.resolve(kind)(data, self.ico)
