"""Application entry point for the ID card extraction API server."""

import uvicorn

from idcard.api.app import app
from idcard.utils.config import load_config
from idcard.utils.logger import setup_logging


def main() -> None:
    """Start the FastAPI application server."""
    config = load_config()
    setup_logging(config.log_level)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
