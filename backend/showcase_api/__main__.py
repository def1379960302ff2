"""Run the API and notification socket with uvicorn."""

import uvicorn

from showcase_api.config import settings


def main() -> None:
    uvicorn.run(
        "showcase_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=settings.backend_reload,
        ws_max_size=settings.ws_max_message_bytes,
    )


if __name__ == "__main__":
    main()
