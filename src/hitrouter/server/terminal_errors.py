"""Terminal error formatting for recovered handler failures.

Used when a panic handler recovers an exception: the failure is still
logged, in a compact form that highlights application frames.

Verbosity is controlled by the ``HITROUTER_TRACEBACK`` environment
variable: ``compact`` (default), ``full``, or ``minimal``.
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hitrouter.http.request import Request

logger = logging.getLogger("hitrouter.server")


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages)."""
    if "site-packages" in filename:
        return False
    if filename.startswith("<"):
        return False
    stdlib_prefix = os.path.dirname(os.__file__)
    return not filename.startswith(stdlib_prefix)


def format_compact_traceback(exc: BaseException) -> str:
    """Error summary plus at most five application frames."""
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []

    app_frames = [f for f in frames if _is_app_frame(f.filename)]
    display_frames = app_frames if app_frames else frames[-3:]

    parts = [f"{type(exc).__name__}: {exc}"]
    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-5:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")

    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary with the innermost location."""
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    last = frames[-1] if frames else None
    location = f" at {last.filename}:{last.lineno}" if last else ""
    return f"{type(exc).__name__}{location}: {exc}"


def log_error(exc: BaseException, request: Request | None = None) -> None:
    """Log a recovered handler failure at the configured verbosity."""
    prefix = f"Recovered {request.method} {request.path}" if request is not None else "Recovered"

    traceback_style = os.environ.get("HITROUTER_TRACEBACK", "compact").lower()

    if traceback_style == "full":
        logger.error("%s", prefix, exc_info=exc)
    elif traceback_style == "minimal":
        logger.error("%s: %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
