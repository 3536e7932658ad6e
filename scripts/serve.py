"""
Run the ingestion API with uvicorn on the configured host and port.
"""

from __future__ import annotations

import uvicorn

from app.config import get_server_settings


def main() -> int:
    settings = get_server_settings()
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
