"""
Entity Module

Reads request bodies and writes response bodies for a negotiated media type.
Supports:
- JSON and XML readers/writers
- Pretty printing per response
- Media type lookup with lenient substring fallback
"""

from .accessors import EntityJSON, EntityReader, EntityWriter, EntityXML
from .errors import EntityError, EntityReadError, EntityWriteError, UnsupportedMediaType
from .http import HEADER_CONTENT_TYPE, MIME_JSON, MIME_XML, Request, Response
from .registry import EntityAccessorRegistry, ReadWriteLock, entity_registry

__all__ = [
    "EntityReader",
    "EntityWriter",
    "EntityJSON",
    "EntityXML",
    "EntityAccessorRegistry",
    "ReadWriteLock",
    "entity_registry",
    "Request",
    "Response",
    "EntityError",
    "EntityReadError",
    "EntityWriteError",
    "UnsupportedMediaType",
    "MIME_JSON",
    "MIME_XML",
    "HEADER_CONTENT_TYPE",
]
