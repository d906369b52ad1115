"""Run the sensor gateway with uvicorn using ``GATEWAY_*`` settings."""

import logging
import sys

import uvicorn

from gateway.errors import ConfigError
from server.config import GatewayConfig


def main() -> int:
    try:
        config = GatewayConfig.from_env()
    except ConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger(__name__).info(
        "Application gateway is running on http://%s:%d", config.host, config.port
    )
    uvicorn.run(
        "server.main:app",
        host=config.host,
        port=config.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
