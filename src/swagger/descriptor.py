"""
Type Descriptors - Portable view of Python runtime types for the model builder.

The builder never inspects Python types directly. It walks TypeDescriptor
objects, which expose:
- a kind tag (primitive kinds, struct, sequence, optional, unsupported)
- a canonical name ("module.TypeName") and an anonymous flag
- an element descriptor for sequences and optional references
- the ordered member list of structs (name, type, directive, embedded flag)

Descriptors are derived from dataclasses and ``typing`` annotations.
Anonymous composites are created with ``struct()``.
"""

import collections.abc
import dataclasses
import logging
import sys
import types
import typing
from dataclasses import dataclass, field as dataclass_field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from src.swagger.directives import FieldDirective, directive_of, is_embedded

logger = logging.getLogger(__name__)

ANONYMOUS_MARKER = "__swagger_anonymous__"


class Kind(str, Enum):
    """Kind tags of described types"""
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRUCT = "struct"
    SEQUENCE = "sequence"
    OPTIONAL = "optional"
    UNSUPPORTED = "unsupported"

    @property
    def is_primitive(self) -> bool:
        return self in PRIMITIVE_KINDS


PRIMITIVE_KINDS = frozenset({Kind.STRING, Kind.INTEGER, Kind.NUMBER, Kind.BOOLEAN})

# Python class -> (kind, format); looked up along the MRO so bool wins over int
# and datetime wins over date
PRIMITIVES: Dict[type, Tuple[Kind, Optional[str]]] = {
    str: (Kind.STRING, None),
    bool: (Kind.BOOLEAN, None),
    int: (Kind.INTEGER, None),
    float: (Kind.NUMBER, None),
    Decimal: (Kind.NUMBER, None),
    datetime: (Kind.STRING, "date-time"),
    date: (Kind.STRING, "date"),
    UUID: (Kind.STRING, "uuid"),
    bytes: (Kind.STRING, "byte"),
}

SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
)


@dataclass
class Member:
    """A declared member of a struct"""
    name: str
    type: "TypeDescriptor"
    directive: FieldDirective = dataclass_field(default_factory=FieldDirective)
    embedded: bool = False


@dataclass
class TypeDescriptor:
    """Describes one type for the model builder"""
    kind: Kind
    name: str = ""  # Canonical name, e.g. "orders.Order"
    python_type: Any = None
    elem: Optional["TypeDescriptor"] = None  # Sequence element / optional target
    format: Optional[str] = None
    type_name: str = ""  # Python name of a primitive, e.g. "int"
    anonymous: bool = False

    def members(self) -> List[Member]:
        """Ordered members of a struct (empty for every other kind)"""
        if self.kind != Kind.STRUCT:
            return []
        return _struct_members(self.python_type)

    def unwrap_optional(self) -> "TypeDescriptor":
        """Descriptor behind an optional reference (self otherwise)"""
        if self.kind == Kind.OPTIONAL and self.elem is not None:
            return self.elem
        return self


def canonical_name(tp: Any) -> str:
    """
    Canonical model name of a Python class

    Uses the last segment of the defining module and the class name,
    e.g. ``src.swagger.model.Model`` -> ``model.Model``.
    """
    module = getattr(tp, "__module__", "") or ""
    name = getattr(tp, "__name__", repr(tp))
    return f"{module.rsplit('.', 1)[-1]}.{name}"


def is_anonymous(tp: Any) -> bool:
    """True for struct types created with struct() (not inherited by subclasses)"""
    return isinstance(tp, type) and vars(tp).get(ANONYMOUS_MARKER, False) is True


def struct(*fields, **members) -> type:
    """
    Create an anonymous struct type

    Positional arguments are ``(name, type)`` or ``(name, type, json_field(...))``
    tuples; keyword arguments map member names to types. Positional members
    come first, keywords follow in call order.

    Example:
    ```python
    @dataclass
    class Order:
        customer: struct(name=str, email=str)
    ```
    """
    spec = list(fields) + list(members.items())
    return dataclasses.make_dataclass("struct", spec, namespace={ANONYMOUS_MARKER: True})


def describe(tp: Any) -> TypeDescriptor:
    """
    Build the descriptor of a Python type

    Handles:
    - primitives (str, int, float, bool, Decimal, datetime, date, UUID, bytes, enums)
    - dataclasses (named or anonymous)
    - Optional[X] / X | None
    - List[X], Sequence[X], Set[X], Tuple[X, ...]

    Everything else is described as UNSUPPORTED.
    """
    if isinstance(tp, TypeDescriptor):
        return tp

    # Sample instances describe their class
    if dataclasses.is_dataclass(tp) and not isinstance(tp, type):
        tp = type(tp)

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is typing.Union or origin is types.UnionType:
        non_none = [arg for arg in args if arg is not type(None)]
        if len(non_none) == 1 and len(args) == 2:
            return TypeDescriptor(kind=Kind.OPTIONAL, elem=describe(non_none[0]), python_type=tp)
        return _unsupported(tp)

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return TypeDescriptor(kind=Kind.SEQUENCE, elem=describe(args[0]), python_type=tp)
        return _unsupported(tp)

    if origin in SEQUENCE_ORIGINS:
        if len(args) != 1:
            return _unsupported(tp)
        return TypeDescriptor(kind=Kind.SEQUENCE, elem=describe(args[0]), python_type=tp)

    if not isinstance(tp, type) or origin is not None:
        return _unsupported(tp)

    if dataclasses.is_dataclass(tp):
        return TypeDescriptor(
            kind=Kind.STRUCT,
            name=canonical_name(tp),
            python_type=tp,
            anonymous=is_anonymous(tp),
        )

    for klass in tp.__mro__:
        if klass in PRIMITIVES:
            kind, fmt = PRIMITIVES[klass]
            return TypeDescriptor(kind=kind, python_type=tp, format=fmt, type_name=klass.__name__)

    return _unsupported(tp)


def _unsupported(tp: Any) -> TypeDescriptor:
    return TypeDescriptor(kind=Kind.UNSUPPORTED, python_type=tp, type_name=repr(tp))


def _struct_members(tp: type) -> List[Member]:
    """Describe the dataclass fields of tp in declaration order"""
    # The class itself is made resolvable so local self-referencing
    # dataclasses can use a string annotation for their own name
    localns = {tp.__name__: tp}
    try:
        hints = typing.get_type_hints(tp, localns=localns)
    except (NameError, TypeError, AttributeError) as e:
        logger.debug(f"Resolving annotations of {tp!r} one by one: {e}")
        hints = {}

    members = []
    for f in dataclasses.fields(tp):
        annotation = hints[f.name] if f.name in hints else _resolve_annotation(tp, f, localns)
        members.append(
            Member(
                name=f.name,
                type=describe(annotation),
                directive=directive_of(f),
                embedded=is_embedded(f),
            )
        )
    return members


def _resolve_annotation(tp: type, f: dataclasses.Field, localns: Dict[str, Any]) -> Any:
    """
    Resolve the annotation of a single field

    Names are looked up in the module of the class that declares the field.
    Returns the raw annotation when it cannot be resolved.
    """
    annotation = f.type
    if isinstance(annotation, typing.ForwardRef):
        annotation = annotation.__forward_arg__

    owner = next(
        (klass for klass in reversed(tp.__mro__) if vars(klass).get("__dataclass_fields__", {}).get(f.name) is f),
        tp,
    )
    module = sys.modules.get(owner.__module__)
    globalns = vars(module) if module is not None else {}

    holder = types.SimpleNamespace(__annotations__={f.name: annotation})
    try:
        return typing.get_type_hints(holder, globalns=globalns, localns=localns)[f.name]
    except (NameError, TypeError, AttributeError) as e:
        logger.debug(f"Could not resolve {tp.__name__}.{f.name}: {e}")
        return annotation
