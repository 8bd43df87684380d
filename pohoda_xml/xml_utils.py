from collections.abc import Mapping

from .constants import NAMESPACES


def tag(namespace: str, name: str) -> str:
    return f"{{{namespace}}}{name}"


def qualify(prefixed_name: str, namespaces: Mapping[str, str] = NAMESPACES) -> str:
    """Turn a prefixed name such as ``str:storage`` into its Clark form.

    Raises:
        KeyError: If the prefix is not bound in ``namespaces``.
    """
    prefix, sep, local = prefixed_name.partition(":")
    if not sep:
        return prefixed_name
    return tag(namespaces[prefix], local)


def split_tag(clark_name: str) -> tuple[str | None, str]:
    if clark_name.startswith("{"):
        uri, _, local = clark_name[1:].partition("}")
        return uri, local
    return None, clark_name


def prefixes_by_uri(namespaces: Mapping[str, str] = NAMESPACES) -> dict[str, str]:
    return {uri: prefix for prefix, uri in namespaces.items()}


def format_value(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
