import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from finlingo.catalog import Localizer, MessageCatalog
from finlingo.config import STATIC_DIR, settings
from finlingo.errors import MissingParameter, TranslationError
from finlingo.handlers import LocalRequester
from finlingo.llm import TranslateFn, default_backend
from finlingo.middleware import LocaleMiddleware
from finlingo.overlay import TranslationCacheStore
from finlingo.routes import router

logger = logging.getLogger("finlingo.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.localizer.drain()


async def translation_error_handler(_request: Request, exc: TranslationError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": exc.message})


async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    # unparseable or mistyped bodies get the same shape as a missing field
    logger.warning("Rejected request body: %s", exc.errors())
    return JSONResponse(status_code=MissingParameter.status_code, content={"ok": False, "error": "missing parameters"})


def build_localizer() -> Localizer:
    catalog = MessageCatalog(settings.messages_dir, settings.default_locale)
    store = TranslationCacheStore(settings.generated_dir)
    return Localizer(catalog, store)


def create_app(
    localizer: Localizer | None = None,
    translate: TranslateFn | None = None,
    serve_static: bool = True,
) -> FastAPI:
    load_dotenv()
    localizer = localizer or build_localizer()
    translate = translate or default_backend().translate
    if localizer.requester is None:
        localizer.requester = LocalRequester(localizer.store, translate)

    app = FastAPI(title="finlingo", lifespan=lifespan)
    app.state.localizer = localizer
    app.state.translate = translate

    app.add_exception_handler(TranslationError, translation_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_middleware(LocaleMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    if serve_static and STATIC_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    return app


app = create_app()
