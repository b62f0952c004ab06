"""Cookie Token Store — keeps the bearer token on the client between visits (TokenStore).

Invariants:
    - save/clear act on the outgoing response; load reads the incoming request
    - An explicit `Authorization: Bearer` header wins over the cookie

Design Decisions:
    - httponly + samesite=lax cookie: scripts cannot read the token
"""

from fastapi import Request, Response

BEARER_PREFIX = "bearer "


class CookieTokenStore:
    def __init__(self, request: Request, response: Response, cookie_name: str):
        self._request = request
        self._response = response
        self._cookie_name = cookie_name

    async def save(self, token: str) -> None:
        self._response.set_cookie(
            self._cookie_name, token, httponly=True, samesite="lax",
        )

    async def load(self) -> str | None:
        header = self._request.headers.get("authorization", "")
        if header.lower().startswith(BEARER_PREFIX):
            return header[len(BEARER_PREFIX):].strip() or None
        return self._request.cookies.get(self._cookie_name)

    async def clear(self) -> None:
        self._response.delete_cookie(self._cookie_name)
