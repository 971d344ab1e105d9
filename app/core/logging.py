"""Logging setup shared by the API process and the seed scripts."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once; repeated calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level.upper())

    # SQL echo is controlled by the engine, keep its logger quiet by default
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
