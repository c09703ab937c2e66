"""
Logging setup
Configures the root logger once at application startup
Reference: https://docs.python.org/3/library/logging.html
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger. Calling it again only adjusts the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    root.setLevel(level.upper())
    # SQLAlchemy echo is controlled by DATABASE_ECHO, keep its logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
