"""Run the API server: python -m lifetracker (binds HOST:PORT from settings)."""

import uvicorn

from lifetracker.core.config import settings


def main() -> None:
    uvicorn.run("lifetracker.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
