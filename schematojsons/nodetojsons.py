""" Schema node graph to JSON Schema converter. """

# pylint: disable=too-many-arguments, too-many-instance-attributes, unused-argument

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from schematojsons.common import JSON_SCHEMA_DRAFT, assert_json_literal, is_equal, to_definition_uri
from schematojsons.errors import (MissingDefinitionError, MissingStrategyError, NoSchemaProvidedError,
                                  UnsupportedKeyTypeError, UnsupportedSchemaError)
from schematojsons.features import assign_extra_json_schema_features
from schematojsons.nodes import is_never_schema, is_nullish_schema, is_optional_schema, is_string_schema
from schematojsons.validations import convert_pipe

logger = logging.getLogger(__name__)

DATE_STRATEGIES = ('string', 'integer')
BIGINT_STRATEGIES = ('string', 'integer')
UNDEFINED_STRATEGIES = ('any', 'null')

JsonSchema = Dict[str, Any]
SchemaConverter = Callable[[Any, Callable[[Any], JsonSchema], 'ConversionContext'], JsonSchema]


class DefinitionResolver:
    """
    Reverse lookup from schema node identity to definition name.

    Nodes are matched by identity, not by shape: two structurally equal
    nodes registered under different names stay distinct.
    """

    def __init__(self) -> None:
        self._names: Dict[int, str] = {}
        # keeps registered nodes alive so their ids cannot be reused
        self._nodes: Dict[int, Any] = {}

    def register(self, name: str, node: Any) -> None:
        if id(node) in self._names and self._names[id(node)] != name:
            logger.debug("Schema registered as '%s' is now registered as '%s'", self._names[id(node)], name)
        self._names[id(node)] = name
        self._nodes[id(node)] = node

    def resolve(self, node: Any) -> Optional[str]:
        return self._names.get(id(node))

    @staticmethod
    def ref_uri(name: str) -> str:
        return to_definition_uri(name)


@dataclass(frozen=True)
class ConversionContext:
    """Options shared by all converters during one conversion."""
    resolver: DefinitionResolver = field(default_factory=DefinitionResolver)
    strict_object_types: bool = False
    date_strategy: Optional[str] = None
    bigint_strategy: Optional[str] = None
    undefined_strategy: Optional[str] = None
    ignore_unknown_validation: bool = False
    custom_schema_conversion: Dict[str, SchemaConverter] = field(default_factory=dict)
    custom_validation_conversion: Dict[str, Dict[str, Callable]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for option, value, allowed in (('date_strategy', self.date_strategy, DATE_STRATEGIES),
                                       ('bigint_strategy', self.bigint_strategy, BIGINT_STRATEGIES),
                                       ('undefined_strategy', self.undefined_strategy, UNDEFINED_STRATEGIES)):
            if value is not None and value not in allowed:
                raise ValueError(f"Invalid {option} '{value}', expected one of {', '.join(allowed)}")


def with_default(schema, output: JsonSchema) -> JsonSchema:
    if schema.has_default():
        output['default'] = schema.get_default()
    return output


def convert_optional(schema, convert, context) -> JsonSchema:
    return with_default(schema, dict(convert(schema.wrapped)))


def convert_nullable(schema, convert, context) -> JsonSchema:
    return with_default(schema, {'anyOf': [{'const': None}, convert(schema.wrapped)]})


def convert_union(schema, convert, context) -> JsonSchema:
    return {'anyOf': [convert(option) for option in schema.options]}


def convert_tuple(schema, convert, context) -> JsonSchema:
    """
    Convert a tuple, closed when `rest` is never, open otherwise.

    A 1-tuple whose rest item converts to the same shape is written as a
    plain array of that shape with at least one item. A tuple without
    items is a plain array of its rest.
    """
    items: Any = [convert(item) for item in schema.items]
    min_items = len(items)
    max_items = None
    additional_items = None
    rest = getattr(schema, 'rest', None)
    if is_never_schema(rest):
        max_items = min_items
    elif rest is not None:
        rest_items = convert(rest)
        if len(items) == 1 and is_equal(items[0], rest_items):
            items = items[0]
        elif not items:
            items = rest_items
        else:
            additional_items = rest_items
    output: JsonSchema = {'type': 'array'}
    # draft-07 only allows a non-empty schema array in items
    if items != []:
        output['items'] = items
    if additional_items is not None:
        output['additionalItems'] = additional_items
    if min_items:
        output['minItems'] = min_items
    if max_items is not None:
        output['maxItems'] = max_items
    return output


def convert_strict_tuple(schema, convert, context) -> JsonSchema:
    items = [convert(item) for item in schema.items]
    if not items:
        return {'type': 'array', 'maxItems': 0}
    return {'type': 'array', 'items': items, 'minItems': len(items), 'maxItems': len(items)}


def convert_object(schema, convert, context) -> JsonSchema:
    """
    Convert an object schema.

    Optional and nullish entries are left out of `required`. An explicit
    rest decides `additionalProperties`; without one, the strict object
    option closes the object.
    """
    properties: JsonSchema = {}
    required: List[str] = []
    for key, entry in schema.entries.items():
        if not is_optional_schema(entry) and not is_nullish_schema(entry):
            required.append(key)
        properties[key] = convert(entry)
    output: JsonSchema = {'type': 'object', 'properties': properties}
    rest = getattr(schema, 'rest', None)
    if rest is not None:
        output['additionalProperties'] = False if is_never_schema(rest) else convert(rest)
    elif schema.type == 'strict_object' or context.strict_object_types:
        output['additionalProperties'] = False
    if required:
        output['required'] = required
    return output


def convert_record(schema, convert, context) -> JsonSchema:
    if not is_string_schema(schema.key):
        raise UnsupportedKeyTypeError(getattr(schema.key, 'type', repr(schema.key)))
    return {'type': 'object', 'additionalProperties': convert(schema.value)}


def convert_lazy(schema, convert, context) -> JsonSchema:
    nested = schema.getter()
    def_name = context.resolver.resolve(nested)
    if def_name is None:
        raise MissingDefinitionError("Type inside lazy schema must be provided in the definitions")
    return {'$ref': context.resolver.ref_uri(def_name)}


def convert_date(schema, convert, context) -> JsonSchema:
    if context.date_strategy == 'integer':
        return {'type': 'integer', 'format': 'unix-time'}
    if context.date_strategy == 'string':
        return {'type': 'string', 'format': 'date-time'}
    raise MissingStrategyError('date_strategy', 'date schemas')


def convert_bigint(schema, convert, context) -> JsonSchema:
    if context.bigint_strategy == 'integer':
        return {'type': 'integer', 'format': 'int64'}
    if context.bigint_strategy == 'string':
        return {'type': 'string'}
    raise MissingStrategyError('bigint_strategy', 'bigint schemas')


def convert_undefined(schema, convert, context) -> JsonSchema:
    if context.undefined_strategy == 'any':
        return {}
    if context.undefined_strategy == 'null':
        return {'type': 'null'}
    raise MissingStrategyError('undefined_strategy', 'the undefined schema')


SCHEMA_CONVERTERS: Dict[str, SchemaConverter] = {
    'any': lambda schema, convert, context: {},
    # Core types
    'null': lambda schema, convert, context: {'const': None},
    'literal': lambda schema, convert, context: {'const': assert_json_literal(schema.literal)},
    'number': lambda schema, convert, context: {'type': 'number'},
    'string': lambda schema, convert, context: {'type': 'string'},
    'boolean': lambda schema, convert, context: {'type': 'boolean'},
    # Compositions
    'optional': convert_optional,
    'nullable': convert_nullable,
    'nullish': convert_nullable,
    'picklist': lambda schema, convert, context: {'enum': [assert_json_literal(o) for o in schema.options]},
    'enum': lambda schema, convert, context: {'enum': [assert_json_literal(o) for o in schema.values]},
    'union': convert_union,
    # the discriminator key is already a literal entry of every option
    'variant': convert_union,
    'intersect': lambda schema, convert, context: {'allOf': [convert(option) for option in schema.options]},
    # Complex types
    'array': lambda schema, convert, context: {'type': 'array', 'items': convert(schema.item)},
    'tuple': convert_tuple,
    'tuple_with_rest': convert_tuple,
    'strict_tuple': convert_strict_tuple,
    'object': convert_object,
    'strict_object': convert_object,
    'object_with_rest': convert_object,
    'record': convert_record,
    'lazy': convert_lazy,
    # Strategy dependent types
    'date': convert_date,
    'bigint': convert_bigint,
    'undefined': convert_undefined,
}


class NodeToJsonSchemaConverter:
    """
    Converts a schema node graph to a JSON Schema document.

    Named definitions are converted once each and referenced through
    `#/definitions/<name>`; this is also what makes recursive graphs finite.
    An instance holds the state of one conversion and is reset by `convert`.
    """

    def __init__(self, definitions: Optional[Dict[str, Any]] = None, strict_object_types: bool = False,
                 date_strategy: Optional[str] = None, bigint_strategy: Optional[str] = None,
                 undefined_strategy: Optional[str] = None, ignore_unknown_validation: bool = False,
                 custom_schema_conversion: Optional[Dict[str, SchemaConverter]] = None,
                 custom_validation_conversion: Optional[Dict[str, Dict[str, Callable]]] = None) -> None:
        self.named_definitions = definitions
        resolver = DefinitionResolver()
        for name, node in (definitions or {}).items():
            resolver.register(name, node)
        self.context = ConversionContext(
            resolver=resolver,
            strict_object_types=strict_object_types,
            date_strategy=date_strategy,
            bigint_strategy=bigint_strategy,
            undefined_strategy=undefined_strategy,
            ignore_unknown_validation=ignore_unknown_validation,
            custom_schema_conversion=dict(custom_schema_conversion or {}),
            custom_validation_conversion=dict(custom_validation_conversion or {}),
        )
        self.definitions: JsonSchema = {}
        self.in_progress: Set[str] = set()

    def find_schema_converter(self, schema_type: str) -> SchemaConverter:
        converter = self.context.custom_schema_conversion.get(schema_type) or SCHEMA_CONVERTERS.get(schema_type)
        if converter is None:
            raise UnsupportedSchemaError(schema_type)
        return converter

    def convert_node(self, schema: Any) -> JsonSchema:
        """
        Convert one node, or return a `$ref` when it is a named definition.

        A named node is converted the first time it is met and stored in
        `definitions`; any later visit, including a re-entrant one while it
        is still being converted, only produces the reference.
        """
        resolver = self.context.resolver
        def_name = resolver.resolve(schema)
        if def_name is not None and (def_name in self.definitions or def_name in self.in_progress):
            return {'$ref': resolver.ref_uri(def_name)}

        if def_name is not None:
            self.in_progress.add(def_name)
        schema_type = getattr(schema, 'type', None) or repr(schema)
        converter = self.find_schema_converter(schema_type)
        converted: JsonSchema = dict(converter(schema, self.convert_node, self.context) or {})
        converted.update(convert_pipe(schema_type, getattr(schema, 'pipe', None), self.context))
        assign_extra_json_schema_features(schema, converted)

        if def_name is None:
            return converted
        self.in_progress.discard(def_name)
        logger.debug("Converted definition '%s' (%s)", def_name, schema_type)
        self.definitions[def_name] = converted
        return {'$ref': resolver.ref_uri(def_name)}

    def convert(self, schema: Any = None) -> JsonSchema:
        """
        Convert the main schema and all named definitions to one document.

        Every named definition ends up in `definitions`, reachable from the
        main schema or not. A main schema that is itself a named definition
        is referenced from the root with `$ref`.
        """
        if schema is None and self.named_definitions is None:
            raise NoSchemaProvidedError()
        self.definitions = {}
        self.in_progress = set()

        for node in (self.named_definitions or {}).values():
            self.convert_node(node)

        document: JsonSchema = {'$schema': JSON_SCHEMA_DRAFT}
        if schema is not None:
            main_converted = self.convert_node(schema)
            main_name = self.context.resolver.resolve(schema)
            if main_name is not None:
                document['$ref'] = self.context.resolver.ref_uri(main_name)
            else:
                document.update(main_converted)
        if self.definitions:
            document['definitions'] = self.definitions
        logger.debug("Converted JSON Schema with %d definitions", len(self.definitions))
        return document


def convert_to_json_schema(schema: Any = None, definitions: Optional[Dict[str, Any]] = None, **options: Any) -> JsonSchema:
    """
    Convert a schema node graph to a JSON Schema (draft-07) document.

    :param schema: The main schema, referenced at the root of the document.
    :param definitions: Named schemas, converted into the `definitions` block.
    :param options: strict_object_types, date_strategy ('string', 'integer'),
        bigint_strategy ('string', 'integer'), undefined_strategy ('any', 'null'),
        ignore_unknown_validation, custom_schema_conversion,
        custom_validation_conversion.
    """
    converter = NodeToJsonSchemaConverter(definitions, **options)
    return converter.convert(schema)
