import uvicorn

from infrastructure.services import get_settings
from server import server

server_app = server.handler


def main():
    """Run the API with uvicorn (development entry point)."""
    settings = get_settings()
    uvicorn.run(
        "main:server_app",
        host="0.0.0.0",  # nosec B104
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
