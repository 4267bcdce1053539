import importlib
from typing import Callable


def resolve_callable(fqn: str) -> Callable:
    """Resolves eg `mymod.submod.function` or `mymod.submod.Class` into the object itself"""
    if "." not in fqn:
        raise ValueError(f"not a fully qualified name: {fqn}")
    module_name, attr_name = fqn.rsplit(".", 1)
    module = importlib.import_module(module_name)
    try:
        value = getattr(module, attr_name)
    except AttributeError as e:
        raise ValueError(f"module {module_name} has no attribute {attr_name}") from e
    if not callable(value):
        raise TypeError(f"{fqn} is not callable")
    return value
