"""Main entry point for the API hub.

Usage:
    Development: uvicorn apihub.main:app --reload --port 4800
    Production: python -m apihub.main
"""

from apihub.api import create_app
from apihub.config import config

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "apihub.main:app",
        host=config.host(),
        port=config.port(),
        log_level=config.log_level().lower(),
    )
