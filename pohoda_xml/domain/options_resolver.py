"""Validation of the attribute set an agenda accepts.

Every agenda kind declares which options it knows about (defined), which of
them must be present (required) and optional defaults. ``resolve`` checks an
input mapping against that contract and fails fast on the first violation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping


class OptionsResolverError(ValueError):
    pass

    def __init__(self, message: str, options: Iterable[str]) -> None:
        super().__init__(message)
        self.options = tuple(sorted(options))


class UnknownOptionError(OptionsResolverError):
    pass


class MissingRequiredOptionError(OptionsResolverError):
    pass


def _as_names(names: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(names, str):
        return (names,)
    return tuple(names)


class OptionsResolver:
    """Declared option contract of a single agenda kind."""

    def __init__(self, kind: str = "") -> None:
        super().__init__()
        self.kind = kind
        self._defined: set[str] = set()
        self._required: set[str] = set()
        self._defaults: dict[str, object] = {}

    @property
    def defined(self) -> frozenset[str]:
        return frozenset(self._defined)

    @property
    def required(self) -> frozenset[str]:
        return frozenset(self._required)

    @property
    def defaults(self) -> Mapping[str, object]:
        return dict(self._defaults)

    def set_defined(self, names: str | Iterable[str]) -> OptionsResolver:
        self._defined.update(_as_names(names))
        return self

    def set_required(self, names: str | Iterable[str]) -> OptionsResolver:
        # A required option is implicitly defined
        names = _as_names(names)
        self._defined.update(names)
        self._required.update(names)
        return self

    def set_default(self, name: str, value: object) -> OptionsResolver:
        self._defined.add(name)
        self._defaults[name] = value
        return self

    def is_defined(self, name: str) -> bool:
        return name in self._defined

    def is_required(self, name: str) -> bool:
        return name in self._required

    def resolve(self, options: Mapping[str, object]) -> dict[str, object]:
        """Validate ``options`` and return them merged over declared defaults.

        Args:
            options: Flat mapping of option name to value

        Returns:
            A new dict; the input mapping is never modified.

        Raises:
            UnknownOptionError: If ``options`` holds a name that is not defined
            MissingRequiredOptionError: If a required name is absent
        """
        unknown = set(options) - self._defined
        if unknown:
            raise UnknownOptionError(
                f"{self._label()}option(s) {', '.join(sorted(unknown))} do not exist; "
                f"defined options are: {', '.join(sorted(self._defined)) or '(none)'}",
                unknown,
            )

        resolved = {**self._defaults, **options}

        missing = self._required - set(resolved)
        if missing:
            raise MissingRequiredOptionError(
                f"{self._label()}required option(s) {', '.join(sorted(missing))} "
                "are missing",
                missing,
            )

        return resolved

    def _label(self) -> str:
        return f"{self.kind}: " if self.kind else ""
