from io import BytesIO

import pytest

from pohoda_xml.domain import Storage


@pytest.fixture(autouse=True)
def _isolated_pohoda_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of config-sensitive tests."""
    monkeypatch.delenv("POHODA_ICO", raising=False)
    monkeypatch.delenv("POHODA_APPLICATION", raising=False)


@pytest.fixture
def sink() -> BytesIO:
    return BytesIO()


@pytest.fixture
def storage_tree() -> Storage:
    """Storage ``MAIN`` with two children, the first of which has one child."""
    root = Storage({"code": "MAIN", "name": "Main storage"}, "12345678")
    shelf = Storage({"code": "SHELF"}, "12345678")
    shelf.add_child(Storage({"code": "BOX", "name": "Box 1"}, "12345678"))
    root.add_child(shelf)
    root.add_child(Storage({"code": "YARD"}, "12345678"))
    return root
