"""Error taxonomy for the translation-fallback pipeline.

``TranslationError`` subclasses carry the HTTP status they map to; the
exception handler in ``finlingo.main`` renders them as
``{"ok": false, "error": ...}``.  ``PersistenceFailure`` and
``CacheLoadFailure`` never leave the cache store: they are logged there and
swallowed.
"""


class TranslationError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingParameter(TranslationError):
    status_code = 400

    def __init__(self, missing: list[str] | None = None) -> None:
        self.missing = missing or []
        super().__init__("missing parameters")


class UnsupportedLocale(TranslationError):
    status_code = 400

    def __init__(self, locale: str) -> None:
        self.locale = locale
        super().__init__(f"unsupported locale: {locale}")


class BackendTranslationFailure(TranslationError):
    status_code = 500


class PersistenceFailure(Exception):
    pass


class CacheLoadFailure(Exception):
    """``retryable`` is set when the file exists but could not be read (I/O error)."""

    def __init__(self, message: str, retryable: bool = False) -> None:
        self.retryable = retryable
        super().__init__(message)
