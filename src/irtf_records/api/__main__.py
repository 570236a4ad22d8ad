"""
irtf_records.api.__main__

Runs the records API under uvicorn: `python -m irtf_records.api`.
"""

from __future__ import annotations

import uvicorn

from irtf_records.api.app import create_app
from irtf_records.settings import get_settings


def main() -> None:
    settings = get_settings()

    # Access lines come from RequestContextMiddleware; uvicorn's own would duplicate them.
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
