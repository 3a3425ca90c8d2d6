"""Router import resolution — resolves ``"module:attribute"`` strings.

Shared by ``hitrouter routes`` and ``hitrouter run``.
"""

import importlib

from hitrouter.app import HitRouter


def resolve_app(import_string: str) -> HitRouter:
    """Resolve an import string to a HitRouter instance.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"router"``. A callable that is not already a HitRouter
    is treated as a factory and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a HitRouter, or a
            factory raised.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "router"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, HitRouter):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, HitRouter):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a HitRouter instance"
        raise TypeError(msg)

    return obj
