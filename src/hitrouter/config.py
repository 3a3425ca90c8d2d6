"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(debug=True, endpoints_path="/_coverage")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"

    # Introspection routes
    introspection: bool = True
    endpoints_path: str = "/endpoints"
    endpoints_unhit_path: str = "/endpoints/unhit"
    json_indent: int = 2

    # Routing
    redirect_trailing_slash: bool = True
