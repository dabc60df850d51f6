"""Loads schema nodes from a Python source file and writes the JSON Schema.

The source file is imported by path. Without a definitions path, every
public module-level schema node becomes a named definition; with one, the
object at that path (a dict, a class or a module namespace) provides them.
"""

import importlib.util
import json
import logging
import os
import sys
from types import ModuleType
from typing import Any, Dict, Optional

from jsonschema import Draft7Validator

from schematojsons.nodes import is_schema
from schematojsons.nodetojsons import convert_to_json_schema

logger = logging.getLogger(__name__)


def load_module(source_path: str) -> ModuleType:
    """Import a Python source file by path."""
    full_path = os.path.abspath(source_path)
    if not os.path.exists(full_path):
        raise FileNotFoundError(f"Source file {source_path} does not exist")
    module_name = os.path.splitext(os.path.basename(full_path))[0].replace('-', '_').replace('.', '_')
    spec = importlib.util.spec_from_file_location(module_name, full_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Unable to load module from {source_path}")
    module = importlib.util.module_from_spec(spec)
    # dataclasses look the module up by name while it executes; any previous
    # entry under that name is restored afterwards
    previous_module = sys.modules.get(module_name)
    sys.modules[module_name] = module
    # sibling modules of the source file are importable while it executes
    source_dir = os.path.dirname(full_path)
    added_path = source_dir not in sys.path
    if added_path:
        sys.path.insert(0, source_dir)
    try:
        spec.loader.exec_module(module)
    finally:
        if added_path and source_dir in sys.path:
            sys.path.remove(source_dir)
        if previous_module is None:
            sys.modules.pop(module_name, None)
        else:
            sys.modules[module_name] = previous_module
    return module


def get_path(obj: Any, path: str) -> Any:
    """
    Resolve a dotted path of attributes or mapping keys, or None.

    >>> get_path({'schemas': {'Name': 1}}, 'schemas.Name')
    1
    """
    current = obj
    for segment in path.split('.'):
        if isinstance(current, dict):
            current = current.get(segment)
        else:
            current = getattr(current, segment, None)
        if current is None:
            return None
    return current


def collect_schemas(namespace: Any) -> Dict[str, Any]:
    """Public schema nodes of a dict, class or module, in definition order."""
    items = namespace.items() if isinstance(namespace, dict) else vars(namespace).items()
    return {name: value for name, value in items if not name.startswith('_') and is_schema(value)}


def build_json_schema(source_path: str, type_path: Optional[str] = None, definitions_path: Optional[str] = None,
                      **options: Any) -> Dict[str, Any]:
    """Load a source file and convert its schemas to a JSON Schema document."""
    module = load_module(source_path)
    if definitions_path:
        definitions_root = get_path(module, definitions_path)
        if definitions_root is None:
            raise ValueError(f"Definitions path '{definitions_path}' could not be found in {source_path}")
        definitions = collect_schemas(definitions_root)
    else:
        definitions = collect_schemas(module)

    schema = None
    if type_path:
        schema = get_path(module, type_path)
        if schema is None:
            raise ValueError(f"Main type '{type_path}' could not be found in {source_path}")
    logger.debug("Loaded %d definitions from %s", len(definitions), source_path)
    return convert_to_json_schema(schema, definitions, **options)


def json_schema_to_string(json_schema: Dict[str, Any]) -> str:
    """Serialize with stable key order."""
    return json.dumps(json_schema, indent=2, sort_keys=True)


def convert_module_to_json_schema(source_path: str, json_schema_file: Optional[str] = None, type_path: Optional[str] = None,
                                  definitions_path: Optional[str] = None, strict_object_types: bool = False,
                                  date_strategy: Optional[str] = None, bigint_strategy: Optional[str] = None,
                                  undefined_strategy: Optional[str] = None, ignore_unknown_validation: bool = False) -> None:
    """
    Convert the schemas of a Python source file to a JSON Schema file.

    :param source_path: The path to the Python file declaring the schemas.
    :param json_schema_file: The path to the output file, stdout when empty.
    :param type_path: Dotted path to the main type.
    :param definitions_path: Dotted path to the definitions.
    """
    json_schema = build_json_schema(source_path, type_path, definitions_path,
                                    strict_object_types=strict_object_types,
                                    date_strategy=date_strategy,
                                    bigint_strategy=bigint_strategy,
                                    undefined_strategy=undefined_strategy,
                                    ignore_unknown_validation=ignore_unknown_validation)
    # raw features and custom converters can produce keywords of the wrong shape
    Draft7Validator.check_schema(json_schema)
    json_schema_string = json_schema_to_string(json_schema)
    if json_schema_file:
        output_dir = os.path.dirname(json_schema_file)
        if output_dir and not os.path.exists(output_dir):
            os.makedirs(output_dir, exist_ok=True)
        with open(json_schema_file, 'w', encoding='utf-8') as file:
            file.write(json_schema_string)
    else:
        sys.stdout.write(json_schema_string + '\n')
