"""Entity access errors."""


class EntityError(Exception):
    """Base class of entity read/write failures"""


class EntityReadError(EntityError):
    """A request body could not be decoded"""


class EntityWriteError(EntityError):
    """A value could not be encoded onto a response"""


class UnsupportedMediaType(EntityError):
    """No reader/writer is registered for a media type"""

    def __init__(self, media_type: str):
        super().__init__(f"Unsupported media type: {media_type}")
        self.media_type = media_type
