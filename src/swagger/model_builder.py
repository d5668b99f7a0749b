"""
Model Builder - Walks a type recursively and fills a ModelRegistry.

Per member, in declaration order:
- "-" directive: skipped
- embedded struct without name override: members flattened into the owner
- primitive: primitive type, required unless omitempty
- anonymous struct by value: nested model "Parent.member", NOT required
- optional reference to a struct: nested/canonical model, required
- sequence of structs (or optional reference to one): array with $ref, required
- sequence of optional references: empty placeholder model "Parent.member"
- anything else: skipped

A model id is registered before its members are walked, so shared and
self-referencing types are visited once.
"""

import logging
from typing import Any, Optional, Tuple

from src.swagger.descriptor import Kind, Member, TypeDescriptor, describe
from src.swagger.model import ARRAY, Item, Model, ModelProperty, ModelRegistry

logger = logging.getLogger(__name__)


class ModelBuilder:
    """Builds swagger models for a type and everything reachable from it"""

    def __init__(self, registry: Optional[ModelRegistry] = None):
        """
        Initialize ModelBuilder

        Args:
            registry: Registry to fill (a fresh one is created when omitted)
        """
        self.registry = registry if registry is not None else ModelRegistry()

    def add_model(self, tp: Any, name_override: str = "") -> str:
        """
        Register the model of a type (and its nested models)

        Args:
            tp: Dataclass, typing construct or TypeDescriptor
            name_override: Id to register under instead of the canonical name

        Returns:
            The id of the model, or "" when tp has no model (primitives, unsupported types)
        """
        descriptor = describe(tp)

        # Root sequences and optionals document their element
        while descriptor.kind in (Kind.SEQUENCE, Kind.OPTIONAL) and descriptor.elem is not None:
            descriptor = descriptor.elem

        if descriptor.kind != Kind.STRUCT:
            logger.debug(f"No model for {descriptor.type_name or descriptor.kind.value}")
            return ""

        return self._add_struct(descriptor, name_override or descriptor.name)

    def _add_struct(self, descriptor: TypeDescriptor, model_id: str) -> str:
        """Register a struct under model_id and walk its members (once per id)"""
        if model_id in self.registry:
            return model_id

        model = Model(id=model_id)
        self.registry.register(model)
        logger.debug(f"Registered model {model_id}")

        self._walk(model, descriptor, model_id, (descriptor.python_type,))
        return model_id

    def _walk(self, model: Model, descriptor: TypeDescriptor, parent_id: str, embedding: Tuple) -> None:
        """
        Add the members of descriptor to model

        Args:
            model: Model being populated
            descriptor: Struct whose members are added (the model's own type or an embedded one)
            parent_id: Prefix for synthetic ids of nested anonymous types
            embedding: Python types on the current embedding path
        """
        for member in descriptor.members():
            directive = member.directive
            if directive.excluded:
                continue

            json_name = directive.json_name(member.name)

            if member.embedded and member.type.kind == Kind.STRUCT and not directive.has_name_override:
                embedded_type = member.type.python_type
                if embedded_type in embedding:
                    logger.debug(f"Skipping recursive embedding of {member.type.name} in {model.id}")
                    continue
                prefix = parent_id if member.type.anonymous else member.type.name
                self._walk(model, member.type, prefix, embedding + (embedded_type,))
                continue

            prop, required = self._build_property(member, json_name, parent_id)
            if prop is None:
                logger.debug(f"Skipping {model.id}.{json_name}: unsupported type {member.type.type_name}")
                continue

            if directive.description:
                prop.description = directive.description

            model.properties[json_name] = prop
            if required and not directive.omit_empty and json_name not in model.required:
                model.required.append(json_name)

    def _build_property(
        self,
        member: Member,
        json_name: str,
        parent_id: str,
    ) -> Tuple[Optional[ModelProperty], bool]:
        """
        Build the property of a single member

        Returns:
            Tuple of (property or None when unrepresentable, whether it is required)
        """
        field_type = member.type

        if member.directive.as_string:
            target = field_type.unwrap_optional()
            if target.kind.is_primitive:
                return ModelProperty(type="string", description=f"({target.type_name} as string)"), True

        if field_type.kind.is_primitive:
            return self._primitive_property(field_type), True

        if field_type.kind == Kind.STRUCT:
            model_id = self._struct_reference(field_type, json_name, parent_id)
            # Anonymous structs held by value stay out of "required"
            return ModelProperty(type=model_id), not field_type.anonymous

        if field_type.kind == Kind.SEQUENCE:
            return self._array_property(field_type, json_name, parent_id), True

        if field_type.kind == Kind.OPTIONAL:
            target = field_type.elem
            if target.kind == Kind.STRUCT:
                return ModelProperty(type=self._struct_reference(target, json_name, parent_id)), True
            if target.kind == Kind.SEQUENCE:
                return self._array_property(target, json_name, parent_id), True
            if target.kind.is_primitive:
                return self._primitive_property(target), True

        return None, False

    def _struct_reference(self, descriptor: TypeDescriptor, json_name: str, parent_id: str) -> str:
        """Register a nested struct and return the id to reference it by"""
        if descriptor.anonymous:
            return self._add_struct(descriptor, f"{parent_id}.{json_name}")
        return self._add_struct(descriptor, descriptor.name)

    def _array_property(self, sequence: TypeDescriptor, json_name: str, parent_id: str) -> Optional[ModelProperty]:
        """Build an array property for a sequence member"""
        elem = sequence.elem

        if elem.kind.is_primitive:
            return ModelProperty(type=ARRAY, items=Item(type=elem.kind.value))

        if elem.kind == Kind.STRUCT:
            return ModelProperty(type=ARRAY, items=Item(ref=self._struct_reference(elem, json_name, parent_id)))

        if elem.kind == Kind.OPTIONAL:
            if elem.elem.kind.is_primitive:
                return ModelProperty(type=ARRAY, items=Item(type=elem.elem.kind.value))
            if elem.elem.kind == Kind.STRUCT:
                # Element models of optional references are never walked
                placeholder_id = f"{parent_id}.{json_name}"
                self.registry.register(Model(id=placeholder_id))
                return ModelProperty(type=ARRAY, items=Item(ref=placeholder_id))

        return None

    @staticmethod
    def _primitive_property(descriptor: TypeDescriptor) -> ModelProperty:
        return ModelProperty(type=descriptor.kind.value, format=descriptor.format)


def build_models(*roots: Any) -> ModelRegistry:
    """
    Build one registry holding the models of all given root types

    Example:
    ```python
    registry = build_models(Order, Customer)
    print(registry.to_json())
    ```
    """
    builder = ModelBuilder()
    for root in roots:
        builder.add_model(root)

    logger.info(f"Built {len(builder.registry)} models from {len(roots)} root types")
    return builder.registry
