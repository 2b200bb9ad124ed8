from __future__ import annotations

import logging
import os

import uvicorn
from dotenv import load_dotenv

# Load .env from backend dir (where server.py runs)
load_dotenv(os.path.join(os.path.dirname(__file__), ".env"))
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

from app.main import app  # noqa: E402


def get_bind() -> tuple[str, int]:
    host = os.environ.get("CTT_HOST", "").strip() or "0.0.0.0"
    port = int(os.environ.get("CTT_PORT", "").strip() or 8000)
    return host, port


def main() -> None:
    host, port = get_bind()
    logging.getLogger(__name__).info("Starting Chick Tac Toe on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
