"""Minimal request/response objects consumed by entity readers and writers."""
import io
from typing import BinaryIO, Optional, Union

from requests.structures import CaseInsensitiveDict

MIME_JSON = "application/json"
MIME_XML = "application/xml"
HEADER_CONTENT_TYPE = "Content-Type"


class Request:
    """Incoming request body plus headers"""

    def __init__(self, body: Union[bytes, str, BinaryIO] = b"", headers: Optional[dict] = None):
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.body = io.BytesIO(body) if isinstance(body, bytes) else body
        self.headers = CaseInsensitiveDict(headers or {})

    @property
    def content_type(self) -> str:
        return self.headers.get(HEADER_CONTENT_TYPE, "")

    def read_body(self) -> bytes:
        return self.body.read()


class Response:
    """Outgoing response: headers plus a writable byte stream"""

    def __init__(self, stream: Optional[BinaryIO] = None, pretty_print: bool = False):
        self.stream = stream if stream is not None else io.BytesIO()
        self.headers = CaseInsensitiveDict()
        self.pretty_print = pretty_print

    def write(self, data: bytes) -> int:
        return self.stream.write(data)

    def getvalue(self) -> bytes:
        """Bytes written so far (only for the default in-memory stream)"""
        return self.stream.getvalue()
