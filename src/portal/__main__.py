"""Portal entrypoint.

Run with:
  python -m portal
"""

import logging

import uvicorn

from portal.config import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("portal.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
