"""
Entity Accessor Registry - Maps media types to readers and writers.

Registrations happen at import time, lookups happen per request from any
number of threads. The tables are guarded by a reader/writer lock: readers
only wait while a registration is in progress.

Lookups try an exact match first, then fall back to the first registered
media type contained in the requested one (e.g. "application/json; charset=utf-8").
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

from src.entity.accessors import EntityJSON, EntityReader, EntityWriter, EntityXML
from src.entity.http import MIME_JSON, MIME_XML

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many concurrent readers, one writer at a time"""

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._condition:
            while self._writing:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._condition:
            while self._writing or self._readers > 0:
                self._condition.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._condition:
                self._writing = False
                self._condition.notify_all()


class EntityAccessorRegistry:
    """Registry of entity readers and writers by media type"""

    def __init__(self):
        self._protection = ReadWriteLock()
        self._readers: Dict[str, EntityReader] = {}
        self._writers: Dict[str, EntityWriter] = {}

    def register_entity_accessors(self, mime: str, reader: EntityReader, writer: EntityWriter) -> None:
        """Register (or replace) the reader and writer of a media type"""
        with self._protection.write_locked():
            self._readers[mime] = reader
            self._writers[mime] = writer
        logger.debug(f"Registered entity accessors for {mime}")

    def reader_at(self, mime: str) -> Tuple[Optional[EntityReader], bool]:
        """
        Find the reader of a media type

        Returns:
            Tuple of (reader or None, found)
        """
        with self._protection.read_locked():
            return self._lookup(self._readers, mime)

    def writer_at(self, mime: str) -> Tuple[Optional[EntityWriter], bool]:
        """
        Find the writer of a media type

        Returns:
            Tuple of (writer or None, found)
        """
        with self._protection.read_locked():
            return self._lookup(self._writers, mime)

    def media_types(self) -> List[str]:
        """Media types with a registered writer, in registration order"""
        with self._protection.read_locked():
            return list(self._writers)

    @staticmethod
    def _lookup(table: Dict, mime: str):
        accessor = table.get(mime)
        if accessor is not None:
            return accessor, True

        # Lenient retry for parameters or partial media types
        for registered, candidate in table.items():
            if registered in mime:
                logger.warning(f"No exact accessor for '{mime}', using '{registered}'")
                return candidate, True

        return None, False


def _default_registry() -> EntityAccessorRegistry:
    registry = EntityAccessorRegistry()
    json_rw = EntityJSON(MIME_JSON)
    xml_rw = EntityXML(MIME_XML)
    registry.register_entity_accessors(MIME_JSON, json_rw, json_rw)
    registry.register_entity_accessors(MIME_XML, xml_rw, xml_rw)
    return registry


# Process-wide instance
entity_registry = _default_registry()
