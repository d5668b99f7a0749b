"""
Field Directives - Per-field serialization instructions attached as dataclass metadata.

Directives use the familiar ``json`` tag mini-language:
- ``"-"``             exclude the field entirely
- ``"B"``             rename the field to ``B``
- ``",omitempty"``    keep the field but never mark it required
- ``",string"``       the value travels as a string-encoded primitive
- ``"B,omitempty"``   options combine after the (possibly empty) name

Usage:
```python
@dataclass
class Product:
    sku: str
    internal_code: str = json_field("-", default="")
    price: int = json_field("price,string", default=0)
```
"""

from dataclasses import dataclass, field as dataclass_field, Field
from typing import Any, Dict

# Metadata keys understood by the model builder
JSON_TAG = "json"
DESCRIPTION = "description"
EMBED = "embed"

OMIT_EMPTY = "omitempty"
AS_STRING = "string"
EXCLUDE = "-"


@dataclass(frozen=True)
class FieldDirective:
    """Parsed directives of a single member"""

    name: str = ""  # Name override ("" keeps the declared name)
    excluded: bool = False
    omit_empty: bool = False
    as_string: bool = False
    description: str = ""

    @property
    def has_name_override(self) -> bool:
        return bool(self.name)

    def json_name(self, declared_name: str) -> str:
        """Name under which the member appears in properties/required"""
        return self.name or declared_name


def parse_json_tag(tag: str, description: str = "") -> FieldDirective:
    """
    Parse a ``json`` tag into a FieldDirective

    Args:
        tag: Tag text, e.g. "-", "B", ",omitempty", "C,string"
        description: Optional free-text description of the member

    Returns:
        FieldDirective with the options found in the tag
    """
    if not tag:
        return FieldDirective(description=description)

    if tag == EXCLUDE:
        return FieldDirective(excluded=True, description=description)

    name, *options = tag.split(",")
    return FieldDirective(
        name=name.strip(),
        omit_empty=OMIT_EMPTY in options,
        as_string=AS_STRING in options,
        description=description,
    )


def directive_of(member: Field) -> FieldDirective:
    """Read the directive of a dataclass field from its metadata"""
    metadata = member.metadata or {}
    return parse_json_tag(
        metadata.get(JSON_TAG, ""),
        description=metadata.get(DESCRIPTION, ""),
    )


def is_embedded(member: Field) -> bool:
    """Check whether a dataclass field was declared as an embedding"""
    return bool((member.metadata or {}).get(EMBED, False))


def json_field(tag: str = "", *, description: str = "", embed: bool = False, **kwargs) -> Any:
    """
    Declare a dataclass field carrying serialization directives

    Args:
        tag: ``json`` tag text (see module docstring)
        description: Description rendered into the property schema
        embed: Flatten the members of this (dataclass typed) field into the owner
        **kwargs: Passed through to dataclasses.field (default, default_factory, ...)

    Returns:
        A dataclasses.Field with directive metadata
    """
    metadata: Dict[str, Any] = dict(kwargs.pop("metadata", None) or {})
    if tag:
        metadata[JSON_TAG] = tag
    if description:
        metadata[DESCRIPTION] = description
    if embed:
        metadata[EMBED] = True
    return dataclass_field(metadata=metadata, **kwargs)
