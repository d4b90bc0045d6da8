"""Entry point: python -m agent_relay"""

import uvicorn

from agent_relay.adapters.web.server import create_app
from agent_relay.config import AppConfig


def main():
    config = AppConfig.from_env()
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port, log_level="info")


if __name__ == "__main__":
    main()
