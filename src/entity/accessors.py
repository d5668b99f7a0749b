"""
Entity Accessors - Read request bodies and write response bodies per media type.

Supports:
- JSON (numbers decoded exactly: non-integral numbers become Decimal)
- XML (ElementTree based; pretty output carries the XML declaration)
- Optional decoding into a dataclass target
- Dataclasses, objects with to_dict(), Decimal, dates, UUIDs and enums on write
"""

import dataclasses
import json
import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from src.entity.errors import EntityReadError, EntityWriteError
from src.entity.http import HEADER_CONTENT_TYPE, Request, Response

logger = logging.getLogger(__name__)

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Line prefix and per-level indent of pretty output
PRETTY_PREFIX = " "
PRETTY_INDENT = " "

XML_ROOT_TAG = "entity"
XML_ITEM_TAG = "item"


class EntityReader(ABC):
    """Reads a serialized value from a request"""

    @abstractmethod
    def read(self, request: Request, target: Optional[type] = None) -> Any:
        """
        Decode the request body

        Args:
            request: Request whose body is decoded
            target: Optional dataclass to construct from the decoded mapping

        Raises:
            EntityReadError: If the body cannot be decoded
        """


class EntityWriter(ABC):
    """Writes a serialized value on a response"""

    @abstractmethod
    def write(self, response: Response, value: Any) -> None:
        """
        Encode value onto the response and set its Content-Type

        Nothing is written for None.

        Raises:
            EntityWriteError: If the value cannot be encoded
        """


class EntityJSON(EntityReader, EntityWriter):
    """JSON reader/writer"""

    def __init__(self, content_type: str):
        self.content_type = content_type

    def read(self, request: Request, target: Optional[type] = None) -> Any:
        try:
            data = json.loads(request.read_body() or b"null", parse_float=Decimal)
        except (ValueError, UnicodeDecodeError) as e:
            raise EntityReadError(f"Invalid JSON body: {e}") from e
        return _construct(target, data)

    def write(self, response: Response, value: Any) -> None:
        if value is None:
            return

        try:
            if response.pretty_print:
                output = json.dumps(value, indent=len(PRETTY_INDENT), default=_to_plain)
                output = output.replace("\n", "\n" + PRETTY_PREFIX)
            else:
                output = json.dumps(value, default=_to_plain) + "\n"
        except (TypeError, ValueError) as e:
            raise EntityWriteError(f"Cannot encode {type(value).__name__} as JSON: {e}") from e

        response.headers[HEADER_CONTENT_TYPE] = self.content_type
        response.write(output.encode("utf-8"))


class EntityXML(EntityReader, EntityWriter):
    """XML reader/writer"""

    def __init__(self, content_type: str):
        self.content_type = content_type

    def read(self, request: Request, target: Optional[type] = None) -> Any:
        try:
            root = ET.fromstring(request.read_body())
        except ET.ParseError as e:
            raise EntityReadError(f"Invalid XML body: {e}") from e
        return _construct(target, _from_element(root))

    def write(self, response: Response, value: Any) -> None:
        if value is None:
            return

        try:
            element = _to_element(_root_tag(value), value)
        except (TypeError, ValueError) as e:
            raise EntityWriteError(f"Cannot encode {type(value).__name__} as XML: {e}") from e

        response.headers[HEADER_CONTENT_TYPE] = self.content_type
        if response.pretty_print:
            ET.indent(element, space=PRETTY_INDENT, level=1)
            response.write((XML_HEADER + PRETTY_PREFIX).encode("utf-8"))
        response.write(ET.tostring(element, encoding="unicode").encode("utf-8"))


def _to_plain(value: Any) -> Any:
    """Convert a non-JSON-native value to plain data (json.dumps default hook)"""
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return value.to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def _construct(target: Optional[type], data: Any) -> Any:
    if target is None:
        return data
    if not isinstance(data, dict):
        raise EntityReadError(f"Cannot build {target.__name__} from {type(data).__name__}")
    try:
        return target(**data)
    except TypeError as e:
        raise EntityReadError(f"Cannot build {target.__name__}: {e}") from e


def _root_tag(value: Any) -> str:
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        return XML_ROOT_TAG
    return type(value).__name__


def _xml_name(name: str) -> str:
    """Turn an arbitrary key into a usable XML tag"""
    cleaned = "".join(c if c.isalnum() or c in "_.-" else "_" for c in str(name))
    if not cleaned:
        return XML_ITEM_TAG
    if not (cleaned[0].isalpha() or cleaned[0] == "_"):
        cleaned = f"_{cleaned}"
    return cleaned


def _to_element(tag: str, value: Any) -> ET.Element:
    if not isinstance(value, (dict, list, str, int, float, bool)) and value is not None:
        value = _to_plain(value)

    element = ET.Element(_xml_name(tag))
    if isinstance(value, dict):
        for key, child in value.items():
            _append_children(element, key, child)
    elif isinstance(value, list):
        for child in value:
            element.append(_to_element(XML_ITEM_TAG, child))
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif value is not None:
        element.text = str(value)
    return element


def _append_children(parent: ET.Element, key: str, value: Any) -> None:
    # Sequences become repeated elements named after their key
    if isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            parent.append(_to_element(key, item))
    else:
        parent.append(_to_element(key, value))


def _from_element(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        return element.text or ""

    result: Dict[str, Any] = {}
    for child in children:
        value = _from_element(child)
        if child.tag in result:
            existing = result[child.tag]
            if not isinstance(existing, list):
                result[child.tag] = existing = [existing]
            existing.append(value)
        else:
            result[child.tag] = value
    return result
