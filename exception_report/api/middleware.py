"""Request middleware binding a request id for reports and log records."""

from __future__ import annotations

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from exception_report.core.ids import IdGenerator, generate_id
from exception_report.core.logging import bind_request_id, reset_request_id


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a stable request_id to each request for correlation.

    The id is echoed on the response and copied into every report built while
    the request is in flight, so a client can quote it back.
    """

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = "X-Request-ID",
        id_generator: IdGenerator = generate_id,
    ) -> None:
        super().__init__(app)
        self.header_name = header_name
        self.id_generator = id_generator

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self.header_name) or self.id_generator()

        request.state.request_id = request_id
        token = bind_request_id(request_id)

        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)

        response.headers[self.header_name] = request_id
        return response


__all__ = ["RequestIDMiddleware"]
