import uvicorn

from birthday_wisher.api.main import app
from birthday_wisher.core.settings import get_settings

__all__ = ["app", "run"]


def run() -> None:
    settings = get_settings()
    uvicorn.run("birthday_wisher.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
