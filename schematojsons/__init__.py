import importlib

mod = "schematojsons"


class LazyLoader:
    """
    Resolves the public converter API on first access so that importing
    the package (and starting the CLI) stays cheap.
    """

    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, attr_name = self._mappings[item]
            return getattr(self._load_module(module_name), attr_name)
        # submodules, e.g. schematojsons.nodes
        return self._load_module(f"{mod}.{item}")


# Public names and the modules that define them
_mappings = {
    "convert_to_json_schema": (f"{mod}.nodetojsons", "convert_to_json_schema"),
    "NodeToJsonSchemaConverter": (f"{mod}.nodetojsons", "NodeToJsonSchemaConverter"),
    "convert_module_to_json_schema": (f"{mod}.moduleloader", "convert_module_to_json_schema"),
    "with_json_schema_features": (f"{mod}.features", "with_json_schema_features"),
    "json_schema_metadata": (f"{mod}.features", "json_schema_metadata"),
    "SchemaConversionError": (f"{mod}.errors", "SchemaConversionError"),
}

__all__ = list(_mappings)

_lazy_loader = LazyLoader(_mappings)


def __getattr__(name):
    return getattr(_lazy_loader, name)
