"""Locale resolution middleware."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from finlingo.locales import PREFERRED_LOCALE_COOKIE, preferred_redirect, resolve_locale


class LocaleMiddleware(BaseHTTPMiddleware):
    """Expose ``request.state.locale`` and honour the preference cookie.

    A bare ``/`` with a valid ``preferred-locale`` cookie is redirected to
    ``/<locale>``.  Otherwise the locale path prefix wins, then the cookie,
    then the default locale.  The resolved locale is echoed back via the
    ``Content-Language`` response header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        cookie = request.cookies.get(PREFERRED_LOCALE_COOKIE)
        target = preferred_redirect(request.url.path, cookie)
        if target:
            query = request.url.query
            return RedirectResponse(f"{target}?{query}" if query else target, status_code=307)

        locale = resolve_locale(request.url.path, cookie)
        request.state.locale = locale

        response = await call_next(request)
        response.headers["Content-Language"] = locale
        return response
