# erp/core/logging.py
import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    One stdout handler on the root logger:
    - existing handlers are dropped so records are not printed twice
    - sqlalchemy.engine stays at WARNING unless running at DEBUG
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level.upper() == "DEBUG" else logging.WARNING
    )
