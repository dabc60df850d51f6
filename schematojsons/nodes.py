"""Schema nodes consumed by the JSON Schema converter.

A schema node describes one type in a validation graph. Every node exposes
its kind in `type`, its kind-specific fields, and an ordered `pipe` of
validation and metadata actions. Nodes are shared by reference: the same
instance may sit below several parents and in a definitions map at the same
time, so builders never copy the children they are given.

The builders mirror the vocabulary of validation libraries:

    ListItem = object_({'type': literal('li'), 'children': array(union([string(), lazy(lambda: List)]))})
    List = object_({'type': literal('ul'), 'children': array(ListItem)})
    Name = pipe(string(), min_length(1), max_length(64))
"""

# pylint: disable=too-few-public-methods, redefined-builtin

import copy
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple


class Action:
    """
    One step of a node pipe.

    `kind` is 'validation' or 'metadata'; `type` selects the converter.
    Validations carry a `requirement`, metadata carries its payload in
    `metadata` (or `description`/`title`).
    """

    def __init__(self, kind: str, type: str, requirement: Any = None, **payload: Any) -> None:
        self.kind = kind
        self.type = type
        self.requirement = requirement
        for key, value in payload.items():
            setattr(self, key, value)

    def __repr__(self) -> str:
        return f"Action({self.kind!r}, {self.type!r}, requirement={self.requirement!r})"


class SchemaNode:
    """Base class of all schema nodes."""

    type: str = ''

    def __init__(self) -> None:
        self.pipe: Tuple[Action, ...] = ()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.type!r})"


class AnySchema(SchemaNode):
    type = 'any'


class NullSchema(SchemaNode):
    type = 'null'


class NumberSchema(SchemaNode):
    type = 'number'


class StringSchema(SchemaNode):
    type = 'string'


class BooleanSchema(SchemaNode):
    type = 'boolean'


class DateSchema(SchemaNode):
    type = 'date'


class BigintSchema(SchemaNode):
    type = 'bigint'


class UndefinedSchema(SchemaNode):
    type = 'undefined'


class NeverSchema(SchemaNode):
    """The uninhabited type, used as `rest` to close objects and tuples."""
    type = 'never'


class LiteralSchema(SchemaNode):
    type = 'literal'

    def __init__(self, literal: Any) -> None:
        super().__init__()
        self.literal = literal


_NO_DEFAULT = object()


class WrapperSchema(SchemaNode):
    """Base of nullable, nullish and optional: a wrapped node plus a default."""

    def __init__(self, wrapped: SchemaNode, default: Any = _NO_DEFAULT) -> None:
        super().__init__()
        self.wrapped = wrapped
        self.default = default

    def has_default(self) -> bool:
        return self.default is not _NO_DEFAULT

    def get_default(self) -> Any:
        """Default value, evaluating a zero-argument callable default."""
        if not self.has_default():
            return None
        if callable(self.default):
            return self.default()
        return self.default


class NullableSchema(WrapperSchema):
    type = 'nullable'


class NullishSchema(WrapperSchema):
    type = 'nullish'


class OptionalSchema(WrapperSchema):
    type = 'optional'


class PicklistSchema(SchemaNode):
    type = 'picklist'

    def __init__(self, options: Sequence[Any]) -> None:
        super().__init__()
        self.options = list(options)


class EnumSchema(SchemaNode):
    """Enumeration over the values of a mapping, an `enum.Enum` class or an iterable."""
    type = 'enum'

    def __init__(self, enum: Any) -> None:
        super().__init__()
        self.enum = enum

    @property
    def values(self) -> List[Any]:
        if isinstance(self.enum, dict):
            return list(self.enum.values())
        if isinstance(self.enum, type):
            return [member.value for member in self.enum]
        return list(self.enum)


class UnionSchema(SchemaNode):
    type = 'union'

    def __init__(self, options: Sequence[SchemaNode]) -> None:
        super().__init__()
        self.options = list(options)


class VariantSchema(SchemaNode):
    type = 'variant'

    def __init__(self, key: str, options: Sequence[SchemaNode]) -> None:
        super().__init__()
        self.key = key
        self.options = list(options)


class IntersectSchema(SchemaNode):
    type = 'intersect'

    def __init__(self, options: Sequence[SchemaNode]) -> None:
        super().__init__()
        self.options = list(options)


class ArraySchema(SchemaNode):
    type = 'array'

    def __init__(self, item: SchemaNode) -> None:
        super().__init__()
        self.item = item


class TupleSchema(SchemaNode):
    type = 'tuple'

    def __init__(self, items: Sequence[SchemaNode]) -> None:
        super().__init__()
        self.items = list(items)


class StrictTupleSchema(TupleSchema):
    type = 'strict_tuple'


class TupleWithRestSchema(TupleSchema):
    type = 'tuple_with_rest'

    def __init__(self, items: Sequence[SchemaNode], rest: SchemaNode) -> None:
        super().__init__(items)
        self.rest = rest


class ObjectSchema(SchemaNode):
    type = 'object'

    def __init__(self, entries: Dict[str, SchemaNode]) -> None:
        super().__init__()
        self.entries = dict(entries)


class StrictObjectSchema(ObjectSchema):
    type = 'strict_object'


class ObjectWithRestSchema(ObjectSchema):
    type = 'object_with_rest'

    def __init__(self, entries: Dict[str, SchemaNode], rest: SchemaNode) -> None:
        super().__init__(entries)
        self.rest = rest


class RecordSchema(SchemaNode):
    type = 'record'

    def __init__(self, key: SchemaNode, value: SchemaNode) -> None:
        super().__init__()
        self.key = key
        self.value = value


class LazySchema(SchemaNode):
    """A node whose target is produced by `getter` at conversion time."""
    type = 'lazy'

    def __init__(self, getter: Callable[[], SchemaNode]) -> None:
        super().__init__()
        self.getter = getter


def is_schema(value: Any) -> bool:
    return isinstance(value, SchemaNode)


def is_never_schema(node: Any) -> bool:
    return getattr(node, 'type', None) == 'never'


def is_optional_schema(node: Any) -> bool:
    return getattr(node, 'type', None) == 'optional'


def is_nullish_schema(node: Any) -> bool:
    return getattr(node, 'type', None) == 'nullish'


def is_string_schema(node: Any) -> bool:
    return getattr(node, 'type', None) == 'string'


def any_() -> AnySchema:
    return AnySchema()


def null() -> NullSchema:
    return NullSchema()


def number() -> NumberSchema:
    return NumberSchema()


def string() -> StringSchema:
    return StringSchema()


def boolean() -> BooleanSchema:
    return BooleanSchema()


def date() -> DateSchema:
    return DateSchema()


def bigint() -> BigintSchema:
    return BigintSchema()


def undefined() -> UndefinedSchema:
    return UndefinedSchema()


def never() -> NeverSchema:
    return NeverSchema()


def literal(value: Any) -> LiteralSchema:
    return LiteralSchema(value)


def nullable(wrapped: SchemaNode, default: Any = _NO_DEFAULT) -> NullableSchema:
    return NullableSchema(wrapped, default)


def nullish(wrapped: SchemaNode, default: Any = _NO_DEFAULT) -> NullishSchema:
    return NullishSchema(wrapped, default)


def optional(wrapped: SchemaNode, default: Any = _NO_DEFAULT) -> OptionalSchema:
    return OptionalSchema(wrapped, default)


def picklist(options: Sequence[Any]) -> PicklistSchema:
    return PicklistSchema(options)


def enum_(enum: Any) -> EnumSchema:
    return EnumSchema(enum)


def union(options: Sequence[SchemaNode]) -> UnionSchema:
    return UnionSchema(options)


def variant(key: str, options: Sequence[SchemaNode]) -> VariantSchema:
    return VariantSchema(key, options)


def intersect(options: Sequence[SchemaNode]) -> IntersectSchema:
    return IntersectSchema(options)


def array(item: SchemaNode) -> ArraySchema:
    return ArraySchema(item)


def tuple_(items: Sequence[SchemaNode], rest: Optional[SchemaNode] = None) -> TupleSchema:
    """Open tuple, or a tuple with rest items when `rest` is given."""
    if rest is None:
        return TupleSchema(items)
    return TupleWithRestSchema(items, rest)


def strict_tuple(items: Sequence[SchemaNode]) -> StrictTupleSchema:
    return StrictTupleSchema(items)


def object_(entries: Dict[str, SchemaNode], rest: Optional[SchemaNode] = None) -> ObjectSchema:
    """Open object, or an object with rest entries when `rest` is given."""
    if rest is None:
        return ObjectSchema(entries)
    return ObjectWithRestSchema(entries, rest)


def strict_object(entries: Dict[str, SchemaNode]) -> StrictObjectSchema:
    return StrictObjectSchema(entries)


def record(key: SchemaNode, value: Optional[SchemaNode] = None) -> RecordSchema:
    """Record of `value`; with a single argument the key defaults to string()."""
    if value is None:
        return RecordSchema(string(), key)
    return RecordSchema(key, value)


def lazy(getter: Callable[[], SchemaNode]) -> LazySchema:
    return LazySchema(getter)


def pipe(schema: SchemaNode, *actions: Action) -> SchemaNode:
    """
    Return a copy of `schema` with `actions` appended to its pipe.

    The copy is shallow: children stay shared with the piped node.
    """
    piped = copy.copy(schema)
    piped.pipe = tuple(schema.pipe) + tuple(actions)
    return piped


def _validation(type: str, requirement: Any = None) -> Action:
    return Action('validation', type, requirement)


def length(requirement: int) -> Action:
    return _validation('length', requirement)


def min_length(requirement: int) -> Action:
    return _validation('min_length', requirement)


def max_length(requirement: int) -> Action:
    return _validation('max_length', requirement)


def regex(requirement: 're.Pattern[str] | str') -> Action:
    if isinstance(requirement, str):
        requirement = re.compile(requirement)
    return _validation('regex', requirement)


def value(requirement: Any) -> Action:
    return _validation('value', requirement)


def min_value(requirement: Any) -> Action:
    return _validation('min_value', requirement)


def max_value(requirement: Any) -> Action:
    return _validation('max_value', requirement)


def multiple_of(requirement: Any) -> Action:
    return _validation('multiple_of', requirement)


def integer() -> Action:
    return _validation('integer')


def email() -> Action:
    return _validation('email')


def iso_date() -> Action:
    return _validation('iso_date')


def iso_date_time() -> Action:
    return _validation('iso_date_time')


def iso_timestamp() -> Action:
    return _validation('iso_timestamp')


def ipv4() -> Action:
    return _validation('ipv4')


def ipv6() -> Action:
    return _validation('ipv6')


def uuid() -> Action:
    return _validation('uuid')


def custom(check: Callable[[Any], bool]) -> Action:
    """A validation with no structural JSON Schema equivalent."""
    return _validation('custom', check)


def description(text: str) -> Action:
    return Action('metadata', 'description', description=text)


def title(text: str) -> Action:
    return Action('metadata', 'title', title=text)
