"""HTTP client for the translate-fallback endpoint.

Used by client-side code (the DOM sweep, out-of-process renderers) that talks
to a running finlingo server rather than calling the handlers in-process.
"""

import httpx

from finlingo.errors import BackendTranslationFailure

ENDPOINT_PATH = "/api/translate-fallback"


class EndpointClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def __call__(self, key: str, text: str, target_locale: str) -> str:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    ENDPOINT_PATH,
                    json={"key": key, "text": text, "targetLocale": target_locale},
                )
        except httpx.HTTPError as exc:
            raise BackendTranslationFailure(f"translate-fallback request failed: {exc!r}") from exc

        try:
            body = response.json()
        except ValueError:
            raise BackendTranslationFailure(
                f"translate-fallback returned a non-JSON response ({response.status_code})"
            )

        if not isinstance(body, dict):
            body = {}
        if response.status_code >= 400 or not body.get("ok"):
            raise BackendTranslationFailure(body.get("error") or f"translate-fallback error ({response.status_code})")
        return body.get("translated") or text
