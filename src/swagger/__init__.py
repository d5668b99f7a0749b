"""
Swagger Model Module

Turns Python types into a flat registry of swagger model documents.
Supports:
- Dataclass introspection through portable type descriptors
- json tag directives (rename, exclude, omitempty, string)
- Embedded struct flattening
- Anonymous nested structs with synthetic ids
- Self-referencing and shared types (each type is walked once)
"""

from .cache import ModelCache
from .descriptor import Kind, Member, TypeDescriptor, describe, struct
from .directives import FieldDirective, json_field, parse_json_tag
from .model import Item, Model, ModelProperty, ModelRegistry
from .model_builder import ModelBuilder, build_models

__all__ = [
    "ModelBuilder",
    "ModelCache",
    "ModelRegistry",
    "Model",
    "ModelProperty",
    "Item",
    "Kind",
    "Member",
    "TypeDescriptor",
    "FieldDirective",
    "build_models",
    "describe",
    "struct",
    "json_field",
    "parse_json_tag",
]
