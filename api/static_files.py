from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope


class SinglePageStaticFiles(StaticFiles):
    """Static files with a fallback to the index document for unknown paths.

    Paths with a dot-file segment (``.env``, ``.git/...``) are never served and
    fall back to the index document as well.
    """

    def __init__(self, *, directory: str, index_file: str = "index.html", **kwargs) -> None:
        super().__init__(directory=directory, html=True, **kwargs)
        self.index_file = index_file

    async def get_response(self, path: str, scope: Scope) -> Response:
        if _has_dot_segment(path):
            return await super().get_response(self.index_file, scope)
        try:
            response = await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise
            return await super().get_response(self.index_file, scope)
        if response.status_code == 404:
            return await super().get_response(self.index_file, scope)
        return response


def _has_dot_segment(path: str) -> bool:
    return any(part.startswith(".") and part not in {".", ".."} for part in path.replace("\\", "/").split("/"))
