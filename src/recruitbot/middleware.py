"""URLトークン認証ミドルウェア。"""

import hmac

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """チャット画面・管理画面からのリクエストをトークンで検証するミドルウェア。

    RECRUITBOT_URL_TOKEN が設定されている場合、token クエリパラメータ
    または Authorization: Bearer ヘッダーの一致を要求する。
    /health は検証しない。
    """

    SKIP_PATHS = frozenset({"/health"})

    def __init__(self, app: ASGIApp, url_token: str = "") -> None:
        super().__init__(app)
        self.url_token = url_token

    def _presented_token(self, request: Request) -> str:
        authorization = request.headers.get("authorization", "")
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()
        return request.query_params.get("token", "")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.url_token or request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        presented = self._presented_token(request).encode("utf-8")
        if not hmac.compare_digest(presented, self.url_token.encode("utf-8")):
            return JSONResponse(
                {"error": "Unauthorized", "message": "Invalid or missing token"},
                status_code=401,
            )

        return await call_next(request)
