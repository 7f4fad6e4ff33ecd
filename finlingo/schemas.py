from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TranslateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional so that a missing field yields our 400, not a 422
    key: str | None = None
    text: str | None = None
    target_locale: str | None = Field(default=None, alias="targetLocale")


class TranslateResponse(BaseModel):
    ok: bool = True
    key: str
    translated: str


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str


class MessagesResponse(BaseModel):
    locale: str
    messages: dict[str, Any]


class LocaleRequest(BaseModel):
    locale: str | None = None


class LocaleResponse(BaseModel):
    ok: bool = True
    locale: str


class LocaleInfo(BaseModel):
    code: str
    name: str


class LocalesResponse(BaseModel):
    default: str
    locales: list[LocaleInfo]
