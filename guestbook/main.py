import uvicorn

from guestbook.application import create_app
from guestbook.infrastructure.config.config import load_config
from guestbook.infrastructure.logging import configure_logging, get_logger


config = load_config()
configure_logging(debug=config.app.DEBUG)
logger = get_logger(__name__)

app = create_app(config)


def run() -> None:
    host, port = config.app.get_listen_address()
    logger.info("server_listening", host=host, port=port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    run()
