"""
Uvicorn server entry
"""

import uvicorn

from . import create_app
from ..config import get_config
from ..logging_config import setup_logging


def run_server(host: str = None, port: int = None, debug: bool = False) -> None:
    """Run the API server with configuration defaults"""
    config = get_config()
    setup_logging(level="DEBUG" if debug else config.log_level, fmt=config.log_format)

    uvicorn.run(
        create_app(),
        host=host or config.api_host,
        port=port or config.api_port,
        log_level="debug" if debug else config.log_level.lower()
    )
