"""Standalone finlingo API — translate-fallback, messages and locale endpoints only.

Run with:
    poetry run uvicorn finlingo.standalone:app --host 0.0.0.0 --port 8080 --reload
or:
    poetry run python -m finlingo.standalone
"""

import logging

import uvicorn

from finlingo.main import app

__all__ = ["app"]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    uvicorn.run("finlingo.standalone:app", host="0.0.0.0", port=8080)
