"""Run the Landmarks API server: python -m landmarks"""

import argparse

import uvicorn

from landmarks.config import settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Landmarks API server")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run(
        "landmarks.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
