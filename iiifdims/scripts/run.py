"""Serve the iiifdims API with uvicorn."""

import os

import uvicorn

from iiifdims.config import config


def main() -> None:
    """Run the API server; BIND_HOST and PORT pick the socket."""
    uvicorn.run(
        "iiifdims.main:app",
        host=os.getenv("BIND_HOST", "127.0.0.1"),
        port=config.PORT,
        reload=config.DEBUG,
        access_log=False,
    )


if __name__ == "__main__":
    main()
