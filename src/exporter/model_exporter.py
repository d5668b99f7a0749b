"""Model registry exporter."""
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from src.entity.errors import UnsupportedMediaType
from src.entity.http import Response
from src.entity.registry import EntityAccessorRegistry, entity_registry
from src.swagger.model import ModelRegistry

logger = logging.getLogger(__name__)


class ModelExporter:
    """Export built models through the entity writer of a media type."""

    def __init__(self, accessors: Optional[EntityAccessorRegistry] = None):
        self.accessors = accessors or entity_registry

    def export(
        self,
        models: ModelRegistry,
        output: Union[Path, str, BinaryIO],
        media_type: str,
        pretty_print: bool = True,
    ) -> str:
        """
        Write models to a file path or binary stream.

        Args:
            models: Registry produced by the model builder
            output: Target file path or writable binary stream
            media_type: Media type selecting the entity writer
            pretty_print: Indent the output

        Returns:
            Content-Type set by the writer

        Raises:
            UnsupportedMediaType: If no writer matches media_type
            EntityWriteError: If the writer fails
        """
        writer, found = self.accessors.writer_at(media_type)
        if not found:
            raise UnsupportedMediaType(media_type)

        if isinstance(output, (str, Path)):
            output_file = Path(output)
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, "wb") as f:
                content_type = self._write(writer, models, f, pretty_print)
            logger.info(f"Exported {len(models)} models to {output_file}")
            return content_type

        return self._write(writer, models, output, pretty_print)

    @staticmethod
    def _write(writer, models: ModelRegistry, stream: BinaryIO, pretty_print: bool) -> str:
        response = Response(stream=stream, pretty_print=pretty_print)
        writer.write(response, models.to_dict())
        return response.headers.get("Content-Type", "")
