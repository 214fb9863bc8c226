import importlib

mod = "avrotsify"
class LazyLoader:
    """
    Lazy loader for the avrotsify functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item.startswith('__'):
            raise AttributeError(item)
        if item in self._mappings:
            module_name, attr_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, attr_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the public names and their corresponding module paths
_mappings = {
    "convert_avro_to_typescript": (f"{mod}.avrotots", "convert_avro_to_typescript"),
    "convert_avro_schema_to_typescript": (f"{mod}.avrotots", "convert_avro_schema_to_typescript"),
    "SchemaTranslator": (f"{mod}.translator", "SchemaTranslator"),
    "SchemaDocument": (f"{mod}.translator", "SchemaDocument"),
    "TypeResolver": (f"{mod}.resolver", "TypeResolver"),
    "TypeRegistry": (f"{mod}.registry", "TypeRegistry"),
    "DeclarationBuffer": (f"{mod}.registry", "DeclarationBuffer"),
    "SchemaError": (f"{mod}.schema", "SchemaError"),
    "MalformedInputError": (f"{mod}.schema", "MalformedInputError"),
    "UnsupportedConstructError": (f"{mod}.schema", "UnsupportedConstructError"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
