import argparse
import uvicorn
import os
from constants import HOST, PORT, RELOAD
from logging_config import setup_logging

# Setup logging before importing app
log_level = os.getenv("LOG_LEVEL", "INFO")
log_file = os.getenv("LOG_FILE", None)
setup_logging(log_level=log_level, log_file=log_file)

from logging_config import get_logger

logger = get_logger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="WebSocket signaling relay")
    parser.add_argument("port", nargs="?", type=int, default=PORT, help=f"listen port (default {PORT})")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger.info(f"Server starting on {HOST}:{args.port}")
    uvicorn.run("app:app", host=HOST, port=args.port, reload=RELOAD, log_config=None)


if __name__ == "__main__":
    main()
