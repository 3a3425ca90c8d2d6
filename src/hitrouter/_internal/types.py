"""Shared type aliases used across hitrouter modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]

# NotFound / MethodNotAllowed collaborator: receives (request[, allowed])
FallbackHandler: TypeAlias = Callable[..., Any]

# Panic handler: receives (request, exc) and returns a response value
PanicHandler: TypeAlias = Callable[..., Any]
