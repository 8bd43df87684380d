from collections.abc import Mapping
from types import MappingProxyType
from typing import Final
from xml.etree import ElementTree as ET


class Defaults:
    APPLICATION = "Rshop Pohoda connector"
    ICO = ""
    NOTE = ""
    CONFIG_FILE = "pohoda.toml"


class DataPackFormat:
    VERSION = "2.0"
    ENCODING = "windows-1250"
    ROOT = "dat:dataPack"
    ITEM = "dat:dataPackItem"


NAMESPACES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "adb": "http://www.stormware.cz/schema/version_2/addressbook.xsd",
        "con": "http://www.stormware.cz/schema/version_2/contract.xsd",
        "ctg": "http://www.stormware.cz/schema/version_2/category.xsd",
        "dat": "http://www.stormware.cz/schema/version_2/data.xsd",
        "ftr": "http://www.stormware.cz/schema/version_2/filter.xsd",
        "inv": "http://www.stormware.cz/schema/version_2/invoice.xsd",
        "ipm": "http://www.stormware.cz/schema/version_2/intParam.xsd",
        "lst": "http://www.stormware.cz/schema/version_2/list.xsd",
        "ord": "http://www.stormware.cz/schema/version_2/order.xsd",
        "pre": "http://www.stormware.cz/schema/version_2/prevodka.xsd",
        "str": "http://www.stormware.cz/schema/version_2/storage.xsd",
        "stk": "http://www.stormware.cz/schema/version_2/stock.xsd",
        "typ": "http://www.stormware.cz/schema/version_2/type.xsd",
        "vyd": "http://www.stormware.cz/schema/version_2/vydejka.xsd",
    }
)

# Register namespaces so fragments print with their vendor prefixes
for _prefix, _uri in NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)
