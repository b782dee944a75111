from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from visit_planner.config.logger import get_logger
from visit_planner.errors import PayloadTooLargeError

logger = get_logger(__name__)

PAYLOAD_TOO_LARGE_MESSAGE = "上傳的個案資料過大，請精簡後再試。"


class BodySizeLimitMiddleware:
    """Rejects request bodies over ``max_body_bytes`` with a 413.

    A declared ``Content-Length`` over the limit is rejected without reading.
    Otherwise the body is read and counted (chunked uploads carry no length)
    and replayed to the application once it is known to fit.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared and declared.isdigit() and int(declared) > self.max_body_bytes:
            await self._reject(scope, receive, send, declared)
            return

        chunks: list[bytes] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # Client went away before finishing the body.
                return
            chunk = message.get("body", b"")
            received += len(chunk)
            if received > self.max_body_bytes:
                await self._reject(scope, receive, send, received)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        body = b"".join(chunks)
        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: object) -> None:
        logger.warning("[request.too_large] %s bytes > limit=%s", size, self.max_body_bytes)
        error = PayloadTooLargeError(PAYLOAD_TOO_LARGE_MESSAGE)
        response = JSONResponse(status_code=error.status_code, content=error.to_payload())
        await response(scope, receive, send)
