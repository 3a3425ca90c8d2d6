"""Static file serving for ``HitRouter.serve_files``.

A ``FileServer`` is an ordinary route handler bound to a ``/*filepath``
catch-all. It is registered untracked: file requests never count as
endpoint hits.
"""

import mimetypes
from pathlib import Path

from hitrouter.http.response import Response


class FileServer:
    """Route handler that serves files from a directory.

    Security: resolves symlinks and verifies the final path is within
    the configured directory to prevent path traversal.

    Usage::

        router.serve_files("/static/*filepath", "./public")
    """

    __slots__ = ("_cache_control", "_directory", "_index")

    def __init__(
        self,
        directory: str | Path,
        *,
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._cache_control = cache_control

    @property
    def directory(self) -> Path:
        return self._directory

    def __call__(self, filepath: str) -> Response:
        """Serve *filepath* relative to the root directory."""
        file_path = (self._directory / filepath).resolve() if filepath else self._directory
        if not file_path.is_relative_to(self._directory):
            return Response(body="Forbidden", status=403)

        if file_path.is_dir():
            file_path = file_path / self._index

        if not file_path.is_file():
            return Response(body="Not Found", status=404)

        return self._serve_file(file_path)

    def _serve_file(self, file_path: Path) -> Response:
        """Read a file and build a response."""
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        return Response(
            body=file_path.read_bytes(), content_type=content_type
        ).with_header("Cache-Control", self._cache_control)
