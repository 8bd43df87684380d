"""Domain layer: agenda kinds, their option contracts and the kind registry."""

from .entities.agenda import Agenda
from .entities.storage import Storage
from .exceptions import PohodaDomainError, UnknownEntityKindError, ValidationError
from .options_resolver import (
    MissingRequiredOptionError,
    OptionsResolver,
    OptionsResolverError,
    UnknownOptionError,
)
from .registry import AGENDA_TYPES, EntityFactory, get_agenda_type

__all__ = [
    "AGENDA_TYPES",
    "Agenda",
    "EntityFactory",
    "MissingRequiredOptionError",
    "OptionsResolver",
    "OptionsResolverError",
    "PohodaDomainError",
    "Storage",
    "UnknownEntityKindError",
    "UnknownOptionError",
    "ValidationError",
    "get_agenda_type",
]
