from fastapi import APIRouter, Depends, Request, Response

from finlingo.catalog import Localizer
from finlingo.errors import UnsupportedLocale
from finlingo.handlers import handle_locales, handle_messages, handle_translate_fallback
from finlingo.llm import TranslateFn
from finlingo.preferences import set_locale_cookie
from finlingo.locales import is_supported
from finlingo.schemas import (
    ErrorResponse,
    LocaleRequest,
    LocaleResponse,
    LocalesResponse,
    MessagesResponse,
    TranslateRequest,
    TranslateResponse,
)

router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def get_localizer(request: Request) -> Localizer:
    return request.app.state.localizer


def get_translate(request: Request) -> TranslateFn:
    return request.app.state.translate


@router.post("/api/translate-fallback", response_model=TranslateResponse, responses=ERROR_RESPONSES)
async def translate_fallback(
    payload: TranslateRequest,
    localizer: Localizer = Depends(get_localizer),
    translate: TranslateFn = Depends(get_translate),
) -> TranslateResponse:
    result = await handle_translate_fallback(
        payload.key, payload.text, payload.target_locale, localizer.store, translate,
    )
    return TranslateResponse(**result)


@router.get("/api/messages/{locale}", response_model=MessagesResponse, responses=ERROR_RESPONSES)
async def get_messages(locale: str, localizer: Localizer = Depends(get_localizer)) -> MessagesResponse:
    return MessagesResponse(**await handle_messages(locale, localizer))


@router.get("/api/locales", response_model=LocalesResponse)
async def get_locales() -> LocalesResponse:
    return LocalesResponse(**await handle_locales())


@router.post("/api/locale", response_model=LocaleResponse, responses=ERROR_RESPONSES)
async def set_locale(payload: LocaleRequest, response: Response) -> LocaleResponse:
    locale = (payload.locale or "").strip()
    if not is_supported(locale):
        raise UnsupportedLocale(locale)
    set_locale_cookie(response, locale)
    return LocaleResponse(locale=locale)
