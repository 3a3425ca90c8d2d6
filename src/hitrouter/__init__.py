"""Hitrouter — an ASGI request router that counts endpoint hits.

Register routes, run your test suite against the app, then ask it which
endpoints were never exercised.

Basic usage::

    from hitrouter import HitRouter

    router = HitRouter()

    @router.route("/users/:id")
    def show_user(id: int):
        return {"id": id}

    router.run()

    # GET /endpoints        -> every endpoint with its hit count
    # GET /endpoints/unhit  -> only the ones never requested

Not meant for production traffic: every counted request takes a lock.
"""

from importlib import import_module

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Endpoint",
    "EndpointRegistry",
    "HTTPError",
    "HitRouter",
    "HitRouterError",
    "MethodNotAllowed",
    "NotFound",
    "Redirect",
    "RegistryInvariantError",
    "Request",
    "Response",
    "RouteConflict",
    "RouterConfig",
]

# Public name -> defining module. Keeps ``import hitrouter`` cheap.
_LAZY_IMPORTS: dict[str, str] = {
    "ConfigurationError": "hitrouter.errors",
    "Endpoint": "hitrouter.tracking.registry",
    "EndpointRegistry": "hitrouter.tracking.registry",
    "HTTPError": "hitrouter.errors",
    "HitRouter": "hitrouter.app",
    "HitRouterError": "hitrouter.errors",
    "MethodNotAllowed": "hitrouter.errors",
    "NotFound": "hitrouter.errors",
    "Redirect": "hitrouter.http.response",
    "RegistryInvariantError": "hitrouter.errors",
    "Request": "hitrouter.http.request",
    "Response": "hitrouter.http.response",
    "RouteConflict": "hitrouter.errors",
    "RouterConfig": "hitrouter.config",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API."""
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(import_module(module_name), name)
