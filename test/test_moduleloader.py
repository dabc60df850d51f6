import json
import os
import sys
import tempfile
import unittest
from io import StringIO
from unittest.mock import patch

from jsoncomparison import NO_DIFF, Compare

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from schematojsons.errors import MissingStrategyError, UnsupportedValidationError
from schematojsons.moduleloader import (build_json_schema, collect_schemas, convert_module_to_json_schema, get_path,
                                        json_schema_to_string, load_module)
from schematojsons.nodes import number, string


def node_file(name):
    return os.path.join(os.path.dirname(__file__), 'nodes', name)


class TestModuleLoader(unittest.TestCase):

    def test_get_path_over_dicts_and_attributes(self):
        module = load_module(node_file('single_type_nested.py'))
        self.assertIs(get_path(module, 'schemas.NumberSchema'), module.schemas['NumberSchema'])
        self.assertIsNone(get_path(module, 'schemas.Missing'))
        self.assertIsNone(get_path(module, 'missing.NumberSchema'))

    def test_collect_schemas_skips_private_names(self):
        module = load_module(node_file('private_names.py'))
        self.assertEqual(list(collect_schemas(module)), ['Name'])

    def test_collect_schemas_from_dict(self):
        schemas = {'Name': string(), 'Age': number(), '_private': string(), 'other': 1}
        self.assertEqual(list(collect_schemas(schemas)), ['Name', 'Age'])

    def test_load_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_module(node_file('does_not_exist.py'))

    def test_load_leaves_import_state_unchanged(self):
        path_before = list(sys.path)
        module = load_module(node_file('dataclass_type.py'))
        self.assertEqual(sys.path, path_before)
        self.assertNotIn('dataclass_type', sys.modules)
        self.assertEqual(module.Point(1, 2).y, 2)
        self.assertEqual(list(collect_schemas(module)), ['PointSchema'])

    def test_failed_load_leaves_import_state_unchanged(self):
        source_dir = tempfile.mkdtemp()
        source = os.path.join(source_dir, 'broken_schema.py')
        with open(source, 'w', encoding='utf-8') as file:
            file.write('raise RuntimeError("broken")\n')
        path_before = list(sys.path)
        with self.assertRaises(RuntimeError):
            load_module(source)
        self.assertEqual(sys.path, path_before)
        self.assertNotIn('broken_schema', sys.modules)

    def test_all_module_schemas_are_definitions(self):
        json_schema = build_json_schema(node_file('complex_type.py'))
        with open(node_file('complex-type-ref.json'), 'r', encoding='utf-8') as file:
            reference = json.load(file)
        self.assertEqual(Compare().check(reference, json_schema), NO_DIFF)

    def test_main_type_is_referenced(self):
        json_schema = build_json_schema(node_file('complex_type.py'), type_path='ListElement')
        with open(node_file('complex-type-root-list-element-ref.json'), 'r', encoding='utf-8') as file:
            reference = json.load(file)
        self.assertEqual(Compare().check(reference, json_schema), NO_DIFF)

    def test_nested_type_and_definitions(self):
        json_schema = build_json_schema(node_file('single_type_nested.py'), type_path='schemas.NumberSchema',
                                        definitions_path='schemas')
        self.assertEqual(json_schema['$ref'], '#/definitions/NumberSchema')
        self.assertEqual(json_schema['definitions'], {'NumberSchema': {'type': 'number'}})

    def test_missing_main_type(self):
        with self.assertRaises(ValueError) as ctx:
            build_json_schema(node_file('complex_type.py'), type_path='Missing')
        self.assertIn("Main type 'Missing' could not be found", str(ctx.exception))

    def test_missing_definitions_path(self):
        with self.assertRaises(ValueError) as ctx:
            build_json_schema(node_file('complex_type.py'), definitions_path='schemas')
        self.assertIn("Definitions path 'schemas' could not be found", str(ctx.exception))

    def test_date_requires_strategy(self):
        with self.assertRaises(MissingStrategyError):
            build_json_schema(node_file('date_type.py'), type_path='Event')

    def test_unknown_validation(self):
        with self.assertRaises(UnsupportedValidationError):
            build_json_schema(node_file('unknown_validation.py'))
        json_schema = build_json_schema(node_file('unknown_validation.py'), ignore_unknown_validation=True)
        self.assertEqual(json_schema['definitions']['RegisterSchema']['properties']['password1'],
                         {'type': 'string', 'minLength': 8})

    def test_output_is_stable(self):
        first = json_schema_to_string(build_json_schema(node_file('complex_type.py'), type_path='ListElement'))
        second = json_schema_to_string(build_json_schema(node_file('complex_type.py'), type_path='ListElement'))
        self.assertEqual(first, second)
        self.assertEqual(first, json_schema_to_string(json.loads(first)))

    def test_convert_to_file(self):
        out_file = os.path.join(tempfile.gettempdir(), 'schematojsons', 'date_type.json')
        convert_module_to_json_schema(node_file('date_type.py'), out_file, type_path='Event', date_strategy='string')
        with open(out_file, 'r', encoding='utf-8') as file:
            json_schema = json.load(file)
        self.assertEqual(json_schema['definitions']['Event']['properties']['at'], {'type': 'string', 'format': 'date-time'})
        self.assertEqual(json_schema['$ref'], '#/definitions/Event')

    def test_convert_to_stdout(self):
        with patch('sys.stdout', new_callable=StringIO) as stdout:
            convert_module_to_json_schema(node_file('single_type_nested.py'), definitions_path='schemas')
        self.assertTrue(stdout.getvalue().endswith('\n'))
        self.assertEqual(json.loads(stdout.getvalue())['definitions'], {'NumberSchema': {'type': 'number'}})


if __name__ == '__main__':
    unittest.main()
