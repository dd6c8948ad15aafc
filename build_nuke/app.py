import logging

from flask import Flask

from .api import create_api_blueprint
from .config import NukeConfig, load_config


def configure_logging(level_name: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level_name).upper(), logging.INFO))


def create_app(config: NukeConfig | None = None) -> Flask:
    config = config or load_config()
    app = Flask(__name__)

    configure_logging(config.log_level)

    app.register_blueprint(create_api_blueprint(config=config), url_prefix="/api")
    app.extensions["build_nuke_config"] = config

    return app


def main() -> None:
    config = load_config()
    app = create_app(config)
    logging.getLogger("build_nuke").info("[NUKE]: Serving on %s:%d", config.api_host, config.api_port)
    app.run(host=config.api_host, port=config.api_port)


if __name__ == "__main__":
    main()
