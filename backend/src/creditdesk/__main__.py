"""Run the API server: python -m creditdesk."""
import uvicorn

from creditdesk.config import settings


def main() -> None:
    """Serve the API on the configured host and port."""
    uvicorn.run(
        "creditdesk.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
