import logging

# Severity for operations that permanently destroy data (purge).
IRREVERSIBLE = logging.WARNING + 5
logging.addLevelName(IRREVERSIBLE, "IRREVERSIBLE")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("pos_backend").setLevel(level)
