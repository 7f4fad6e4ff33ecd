"""
NiceGUI sample app: a localized expense dashboard served together with the
finlingo translation API.

Catalog lookups that miss fall back to English and are translated in the
background; text that has no catalog key at all (expense descriptions, ad-hoc
labels) is picked up by the DOM sweep after the page mounts.

Prerequisites:
    GEMINI_API_KEY in .env (GEMINI_API_KEY_2 / _3 optional)
    Run this app:        poetry run python samples/nicegui_host/main.py
    Open http://localhost:8080/hi
"""

import sys
from pathlib import Path

from dotenv import load_dotenv
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from nicegui import app, ui

PROJ_ROOT = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(PROJ_ROOT))

load_dotenv(PROJ_ROOT / '.env')

from finlingo.components import DomTranslator, LanguageSwitcher, LocalePersistence  # noqa: E402
from finlingo.config import settings  # noqa: E402
from finlingo.errors import TranslationError  # noqa: E402
from finlingo.handlers import LocalRequester  # noqa: E402
from finlingo.llm import default_backend  # noqa: E402
from finlingo.locales import is_supported  # noqa: E402
from finlingo.main import build_localizer, translation_error_handler, validation_error_handler  # noqa: E402
from finlingo.middleware import LocaleMiddleware  # noqa: E402
from finlingo.routes import router  # noqa: E402

# -- Wire the translation services into the NiceGUI (FastAPI) app -------------

translate = default_backend().translate
localizer = build_localizer()
localizer.requester = LocalRequester(localizer.store, translate)

app.state.localizer = localizer
app.state.translate = translate
app.add_exception_handler(TranslationError, translation_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.include_router(router)
app.add_middleware(LocaleMiddleware)

SAMPLE_EXPENSES = [
    ('Groceries at the weekly market', '₹1,234.56', '12:30 PM'),
    ('Auto rickshaw to office', '₹180', '09:05 AM'),
    ('Electricity bill', '₹2,310', '06:45 PM'),
    ('Groceries at the weekly market', '₹842.10', '07:15 PM'),
]


@ui.page('/')
async def root():
    return RedirectResponse(f'/{settings.default_locale}')


@ui.page('/{locale}')
async def dashboard(locale: str):
    if not is_supported(locale):
        return RedirectResponse(f'/{settings.default_locale}')

    t = localizer.translator(locale)
    LocalePersistence(locale)

    with ui.header().classes('items-center justify-between'):
        ui.label(t('navbar.title')).style('font-size: 20px; font-weight: 700;')
        with ui.row().classes('items-center'):
            ui.label(t('common.language'))
            LanguageSwitcher(locale, f'/{locale}')

    with ui.column().classes('w-full').style('padding: 24px; max-width: 960px; margin: 0 auto;'):
        ui.label(t('dashboard.title')).style('font-size: 24px; font-weight: 700;')
        ui.label(t('dashboard.greeting', name='Asha'))

        with ui.card().classes('w-full'):
            ui.label(t('dashboard.totalSpent'))
            ui.label('₹4,566.66').style('font-size: 28px; font-weight: 700;')

        with ui.card().classes('w-full'):
            ui.label(t('dashboard.addExpense')).style('font-weight: 600;')
            with ui.row().classes('w-full items-center'):
                ui.input(placeholder=t('dashboard.descriptionPlaceholder')).classes('grow')
                ui.input(placeholder='Amount in rupees')
                ui.button(t('dashboard.addExpense'))

        with ui.card().classes('w-full'):
            ui.label(t('dashboard.recentExpenses')).style('font-weight: 600;')
            for description, amount, when in SAMPLE_EXPENSES:
                with ui.row().classes('w-full justify-between'):
                    ui.label(description)
                    ui.label(amount)
                    ui.label(when)

        with ui.card().classes('w-full'):
            ui.label(t('ai.chatTitle')).style('font-weight: 600;')
            ui.label(t('ai.chatSubtitle'))
            ui.input(placeholder=t('ai.typeMessage')).classes('w-full')
            ui.label('Tip: set a monthly budget for eating out')

    DomTranslator(locale, requester=localizer.requester)


ui.run(port=8080, title='FinTrack', show=False, reload=True,
       storage_secret=settings.get('STORAGE_SECRET') or 'finlingo-dev-secret')
