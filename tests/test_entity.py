"""
Unit tests for the Entity Module

Tests:
- EntityAccessorRegistry: exact lookup, substring fallback, misses, registration
- EntityJSON / EntityXML: reading and writing, pretty printing, errors
- ReadWriteLock: readers share, writers exclude
"""

import threading
from dataclasses import dataclass
from decimal import Decimal
from unittest.mock import Mock

import pytest

from src.entity.accessors import XML_HEADER, EntityJSON, EntityXML
from src.entity.errors import EntityReadError, EntityWriteError
from src.entity.http import MIME_JSON, MIME_XML, Request, Response
from src.entity.registry import EntityAccessorRegistry, ReadWriteLock, entity_registry


@dataclass
class Brand:
    id: int
    name: str


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def accessors():
    """Fresh registry with JSON and XML accessors"""
    registry = EntityAccessorRegistry()
    json_rw = EntityJSON(MIME_JSON)
    xml_rw = EntityXML(MIME_XML)
    registry.register_entity_accessors(MIME_JSON, json_rw, json_rw)
    registry.register_entity_accessors(MIME_XML, xml_rw, xml_rw)
    return registry


# ============================================================================
# TEST: EntityAccessorRegistry
# ============================================================================


class TestEntityAccessorRegistry:
    """Tests for media type lookup"""

    def test_default_registry_has_json_and_xml(self):
        assert entity_registry.media_types() == [MIME_JSON, MIME_XML]

    def test_exact_match(self, accessors):
        writer, found = accessors.writer_at(MIME_JSON)

        assert found is True
        assert isinstance(writer, EntityJSON)

    def test_substring_fallback(self, accessors):
        reader, found = accessors.reader_at("application/json; charset=UTF-8")

        assert found is True
        assert isinstance(reader, EntityJSON)

    def test_fallback_returns_first_registered_match(self, accessors):
        writer, found = accessors.writer_at("application/xml, application/json")

        assert found is True
        assert isinstance(writer, EntityJSON)

    def test_miss_reports_not_found(self, accessors):
        reader, found = accessors.reader_at("text/plain")
        writer, found_writer = accessors.writer_at("")

        assert (reader, found) == (None, False)
        assert (writer, found_writer) == (None, False)

    def test_registration_replaces_accessors(self, accessors):
        reader, writer = Mock(), Mock()
        accessors.register_entity_accessors(MIME_JSON, reader, writer)

        assert accessors.reader_at(MIME_JSON) == (reader, True)
        assert accessors.writer_at(MIME_JSON) == (writer, True)

    def test_concurrent_lookups(self, accessors):
        errors = []

        def lookup():
            for _ in range(200):
                _, found = accessors.writer_at("application/json;q=0.9")
                if not found:
                    errors.append("miss")

        threads = [threading.Thread(target=lookup) for _ in range(8)]
        for t in threads:
            t.start()
        accessors.register_entity_accessors("text/yaml", Mock(), Mock())
        for t in threads:
            t.join()

        assert errors == []
        assert "text/yaml" in accessors.media_types()


# ============================================================================
# TEST: JSON
# ============================================================================


class TestEntityJSON:
    """Tests for EntityJSON"""

    def test_write_compact(self):
        response = Response()

        EntityJSON(MIME_JSON).write(response, {"a": 1})

        assert response.getvalue() == b'{"a": 1}\n'
        assert response.headers["content-type"] == MIME_JSON

    def test_write_pretty(self):
        response = Response(pretty_print=True)

        EntityJSON(MIME_JSON).write(response, {"a": [1]})

        assert response.getvalue() == b'{\n  "a": [\n   1\n  ]\n }'

    def test_write_none_writes_nothing(self):
        response = Response()

        EntityJSON(MIME_JSON).write(response, None)

        assert response.getvalue() == b""
        assert "Content-Type" not in response.headers

    def test_write_dataclass_and_decimal(self):
        response = Response()

        EntityJSON(MIME_JSON).write(response, {"brand": Brand(1, "Acme"), "price": Decimal("2.5")})

        assert response.getvalue() == b'{"brand": {"id": 1, "name": "Acme"}, "price": 2.5}\n'

    def test_write_unserializable_raises(self):
        response = Response()

        with pytest.raises(EntityWriteError):
            EntityJSON(MIME_JSON).write(response, {"lock": threading.Lock()})

        assert response.getvalue() == b""

    def test_read_keeps_numbers_exact(self):
        request = Request(b'{"price": 0.1, "qty": 3}', headers={"Content-Type": MIME_JSON})

        data = EntityJSON(MIME_JSON).read(request)

        assert data == {"price": Decimal("0.1"), "qty": 3}
        assert request.content_type == MIME_JSON

    def test_read_into_dataclass(self):
        brand = EntityJSON(MIME_JSON).read(Request('{"id": 7, "name": "Acme"}'), Brand)

        assert brand == Brand(id=7, name="Acme")

    def test_read_invalid_json(self):
        with pytest.raises(EntityReadError):
            EntityJSON(MIME_JSON).read(Request(b"{not json"))

    def test_read_wrong_shape_for_target(self):
        with pytest.raises(EntityReadError):
            EntityJSON(MIME_JSON).read(Request(b'{"id": 1, "unknown": 2}'), Brand)

        with pytest.raises(EntityReadError):
            EntityJSON(MIME_JSON).read(Request(b"[1, 2]"), Brand)


# ============================================================================
# TEST: XML
# ============================================================================


class TestEntityXML:
    """Tests for EntityXML"""

    def test_write_compact_dataclass(self):
        response = Response()

        EntityXML(MIME_XML).write(response, Brand(1, "Acme"))

        assert response.getvalue() == b"<Brand><id>1</id><name>Acme</name></Brand>"
        assert response.headers["Content-Type"] == MIME_XML

    def test_write_pretty_has_header(self):
        response = Response(pretty_print=True)

        EntityXML(MIME_XML).write(response, {"tags": ["a", "b"], "active": True})

        output = response.getvalue().decode("utf-8")
        assert output.startswith(XML_HEADER)
        assert output[len(XML_HEADER):] == (
            " <entity>\n"
            "  <tags>a</tags>\n"
            "  <tags>b</tags>\n"
            "  <active>true</active>\n"
            " </entity>"
        )

    def test_write_none_writes_nothing(self):
        response = Response(pretty_print=True)

        EntityXML(MIME_XML).write(response, None)

        assert response.getvalue() == b""

    def test_write_unserializable_raises(self):
        with pytest.raises(EntityWriteError):
            EntityXML(MIME_XML).write(Response(), {"lock": threading.Lock()})

    def test_read(self):
        request = Request(b"<Brand><id>1</id><name>Acme</name><tag>x</tag><tag>y</tag></Brand>")

        data = EntityXML(MIME_XML).read(request)

        assert data == {"id": "1", "name": "Acme", "tag": ["x", "y"]}

    def test_read_into_dataclass(self):
        brand = EntityXML(MIME_XML).read(Request(b"<Brand><id>1</id><name>Acme</name></Brand>"), Brand)

        assert brand == Brand(id="1", name="Acme")

    def test_read_invalid_xml(self):
        with pytest.raises(EntityReadError):
            EntityXML(MIME_XML).read(Request(b"<Brand>"))


# ============================================================================
# TEST: ReadWriteLock
# ============================================================================


class TestReadWriteLock:
    """Tests for ReadWriteLock"""

    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(2, timeout=5)

        def reader():
            with lock.read_locked():
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert not any(t.is_alive() for t in threads)

    def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        events = []
        reading = threading.Event()
        release = threading.Event()

        def reader():
            with lock.read_locked():
                reading.set()
                release.wait(timeout=5)
                events.append("read done")

        def writer():
            reading.wait(timeout=5)
            with lock.write_locked():
                events.append("write")

        threads = [threading.Thread(target=reader), threading.Thread(target=writer)]
        for t in threads:
            t.start()
        reading.wait(timeout=5)
        release.set()
        for t in threads:
            t.join(timeout=5)

        assert events == ["read done", "write"]
