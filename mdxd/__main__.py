"""Entry point for running mdxd daemon.

This module provides the ``python -m mdxd`` entry point for starting the daemon.
"""

import logging
import sys

import uvicorn

from mdx_library.config import load_config
from mdx_library.storage import get_log_dir

logger = logging.getLogger(__name__)


def main(host: str | None = None, port: int | None = None) -> None:
    """Run the mdxd daemon.

    Loads configuration and starts the uvicorn server. Explicit ``host`` and
    ``port`` override the configured values.
    """
    try:
        config = load_config()

        # Mirror daemon logs to a file under the log directory
        log_file = get_log_dir() / "mdxd.log"
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logging.getLogger().addHandler(handler)

        uvicorn.run(
            "mdxd.main:app",
            host=host or config.host,
            port=port or config.port,
            log_level=config.log_level.lower(),
        )

    except KeyboardInterrupt:
        logger.info("Received interrupt, shutting down")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Failed to start daemon: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
