"""Conversion of node pipes (validations and metadata) to JSON Schema keywords."""

import datetime
import logging
from typing import Any, Callable, Dict, Iterable

from schematojsons.errors import InvalidRequirementError, UnsupportedValidationError
from schematojsons.features import JSON_SCHEMA_METADATA_TYPE

logger = logging.getLogger(__name__)

ValidationConverter = Callable[[Any, Any], Dict[str, Any]]


def as_date_requirement(validation_name: str, requirement: Any, context) -> int:
    """
    Convert a date requirement to epoch milliseconds.

    Only the 'integer' date strategy has a numeric representation to bound.
    Naive datetimes and plain dates are read as UTC.
    """
    if context.date_strategy != 'integer':
        raise InvalidRequirementError(f"{validation_name} validation is only available with 'integer' date strategy")
    if isinstance(requirement, datetime.datetime):
        moment = requirement
    elif isinstance(requirement, datetime.date):
        moment = datetime.datetime(requirement.year, requirement.month, requirement.day)
    else:
        raise InvalidRequirementError(f"Non-date value used for {validation_name} validation")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    return int(round(moment.timestamp() * 1000))


def pattern_source(requirement: Any) -> str:
    return getattr(requirement, 'pattern', requirement)


VALIDATION_BY_SCHEMA: Dict[str, Dict[str, ValidationConverter]] = {
    'array': {
        'length': lambda v, _: {'minItems': v.requirement, 'maxItems': v.requirement},
        'min_length': lambda v, _: {'minItems': v.requirement},
        'max_length': lambda v, _: {'maxItems': v.requirement},
    },
    'string': {
        'value': lambda v, _: {'const': v.requirement},
        'length': lambda v, _: {'minLength': v.requirement, 'maxLength': v.requirement},
        'min_length': lambda v, _: {'minLength': v.requirement},
        'max_length': lambda v, _: {'maxLength': v.requirement},
        'regex': lambda v, _: {'pattern': pattern_source(v.requirement)},
        'email': lambda v, _: {'format': 'email'},
        'iso_date': lambda v, _: {'format': 'date'},
        'iso_date_time': lambda v, _: {'format': 'date-time'},
        'iso_timestamp': lambda v, _: {'format': 'date-time'},
        'ipv4': lambda v, _: {'format': 'ipv4'},
        'ipv6': lambda v, _: {'format': 'ipv6'},
        'uuid': lambda v, _: {'format': 'uuid'},
    },
    'number': {
        'value': lambda v, _: {'const': v.requirement},
        'min_value': lambda v, _: {'minimum': v.requirement},
        'max_value': lambda v, _: {'maximum': v.requirement},
        'multiple_of': lambda v, _: {'multipleOf': v.requirement},
        'integer': lambda v, _: {'type': 'integer'},
    },
    'boolean': {
        'value': lambda v, _: {'const': v.requirement},
    },
    'date': {
        'value': lambda v, context: {'const': as_date_requirement('value', v.requirement, context)},
        'min_value': lambda v, context: {'minimum': as_date_requirement('min_value', v.requirement, context)},
        'max_value': lambda v, context: {'maximum': as_date_requirement('max_value', v.requirement, context)},
    },
}

# Metadata applies to every schema kind.
METADATA_BY_TYPE: Dict[str, ValidationConverter] = {
    'description': lambda m, _: {'description': m.description},
    'title': lambda m, _: {'title': m.title},
    JSON_SCHEMA_METADATA_TYPE: lambda m, _: dict(m.metadata),
}


def find_validation_converter(schema_type: str, validation_type: str, context) -> ValidationConverter | None:
    """Custom overrides first, then the built-in validation and metadata tables."""
    custom = (context.custom_validation_conversion or {}).get(schema_type, {})
    return (custom.get(validation_type)
            or VALIDATION_BY_SCHEMA.get(schema_type, {}).get(validation_type)
            or METADATA_BY_TYPE.get(validation_type))


def convert_pipe(schema_type: str, pipe: Iterable[Any] | None, context) -> Dict[str, Any]:
    """
    Convert a node pipe to a JSON Schema fragment.

    Actions are applied oldest first; later keys overwrite earlier ones.
    """
    converted: Dict[str, Any] = {}
    for action in pipe or ():
        validation_type = action.type
        converter = find_validation_converter(schema_type, validation_type, context)
        if converter is None:
            if context.ignore_unknown_validation:
                logger.debug("Ignoring unsupported validation `%s` for schema `%s`", validation_type, schema_type)
                continue
            raise UnsupportedValidationError(validation_type, schema_type)
        converted.update(converter(action, context) or {})
    return converted
