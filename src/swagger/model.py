"""
Swagger Models - Schema documents produced by the model builder and their registry.

Rendered shape of a registry (keys of "properties" and model ids ascending):

    {
      "orders.Order": {
        "id": "orders.Order",
        "required": ["lines"],
        "properties": {
          "lines": {"type": "array", "description": "", "items": {"$ref": "orders.Line"}}
        }
      }
    }
"""

import json
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, Iterator, List, Optional, Tuple

ARRAY = "array"
PRIMITIVE_TYPES = frozenset({"string", "integer", "number", "boolean"})


@dataclass
class Item:
    """Element schema of an array property"""
    ref: Optional[str] = None  # Rendered as "$ref"
    type: Optional[str] = None  # Primitive element type

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.ref is not None:
            result["$ref"] = self.ref
        if self.type is not None:
            result["type"] = self.type
        return result


@dataclass
class ModelProperty:
    """Schema of a single model property"""
    type: str
    description: str = ""
    format: Optional[str] = None
    items: Optional[Item] = None

    def is_array(self) -> bool:
        return self.type == ARRAY

    def references(self) -> List[str]:
        """Model ids this property points at"""
        refs = []
        if self.type != ARRAY and self.type not in PRIMITIVE_TYPES:
            refs.append(self.type)
        if self.items is not None and self.items.ref is not None:
            refs.append(self.items.ref)
        return refs

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type, "description": self.description}
        if self.format:
            result["format"] = self.format
        if self.items is not None:
            result["items"] = self.items.to_dict()
        return result


@dataclass
class Model:
    """A named schema document describing one composite type"""
    id: str
    required: List[str] = dataclass_field(default_factory=list)
    properties: Dict[str, ModelProperty] = dataclass_field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the rendered document (required only when non-empty)"""
        result: Dict[str, Any] = {"id": self.id}
        if self.required:
            result["required"] = list(self.required)
        result["properties"] = {
            name: self.properties[name].to_dict() for name in sorted(self.properties)
        }
        return result


class ModelRegistry:
    """
    Append-only mapping of model id -> Model for one build

    Registering an id that is already present is a no-op, which is what
    stops the builder from walking the same type twice. A registered Model
    may still be filled in by the walk that created it.
    """

    def __init__(self):
        self._models: Dict[str, Model] = {}

    def register(self, model: Model) -> bool:
        """
        Register a model under its id

        Returns:
            True if the model was added, False if the id was already taken
        """
        if model.id in self._models:
            return False
        self._models[model.id] = model
        return True

    def get(self, model_id: str) -> Optional[Model]:
        return self._models.get(model_id)

    def ids(self) -> List[str]:
        """Registered ids in registration order"""
        return list(self._models)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._models

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self) -> Iterator[str]:
        return iter(self._models)

    def __getitem__(self, model_id: str) -> Model:
        return self._models[model_id]

    def dangling_refs(self) -> List[Tuple[str, str, str]]:
        """
        List references that do not resolve inside this registry

        Returns:
            (model id, property name, missing id) tuples
        """
        missing = []
        for model_id, model in self._models.items():
            for prop_name, prop in model.properties.items():
                for ref in prop.references():
                    if ref not in self._models:
                        missing.append((model_id, prop_name, ref))
        return missing

    def to_dict(self) -> Dict[str, Any]:
        """Render all models keyed by id (ids ascending)"""
        return {model_id: self._models[model_id].to_dict() for model_id in sorted(self._models)}

    def to_json(self, indent: Optional[int] = 1) -> str:
        return json.dumps(self.to_dict(), indent=indent)
