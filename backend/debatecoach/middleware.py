# debatecoach/middleware.py
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

TOO_LARGE = {"error": "Request body too large"}


class JSONBodyLimitMiddleware:
    """Refuse JSON bodies over `max_bytes` with 413.

    The declared Content-Length is checked up front; chunked bodies are counted
    as they are read, and once the limit is crossed the 413 is sent and
    whatever the app tries to send afterwards is dropped.
    """

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        if "application/json" not in headers.get("content-type", ""):
            await self.app(scope, receive, send)
            return

        length = headers.get("content-length")
        if length and length.isdigit() and int(length) > self.max_bytes:
            await JSONResponse(TOO_LARGE, status_code=413)(scope, receive, send)
            return

        received = 0
        responded = False

        async def limited_receive() -> Message:
            nonlocal received, responded
            message = await receive()
            if message["type"] == "http.request" and not responded:
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    await JSONResponse(TOO_LARGE, status_code=413)(scope, receive, send)
                    responded = True
                    return {"type": "http.disconnect"}
            return message

        async def guarded_send(message: Message) -> None:
            if not responded:
                await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except Exception:
            # the app sees a disconnect mid-body; the client already has its 413
            if not responded:
                raise
