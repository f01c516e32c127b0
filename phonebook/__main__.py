"""Run the Phonebook API with uvicorn on the configured address."""

import uvicorn

from phonebook.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "phonebook.main:app",
        host=settings.host,
        port=settings.port,
        timeout_keep_alive=60,
    )


if __name__ == "__main__":
    main()
