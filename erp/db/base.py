# erp/db/base.py
from __future__ import annotations

import importlib
import logging

from sqlalchemy.orm import DeclarativeBase, configure_mappers

log = logging.getLogger("erp.models")


class Base(DeclarativeBase):
    """Single ORM base for every table."""

    pass


_INITIALIZED: bool = False

_MODEL_MODULES = (
    "erp.models.company",
    "erp.models.user",
    "erp.models.warehouse",
    "erp.models.item",
    "erp.models.inventory",
    "erp.models.transaction",
    "erp.models.notification",
)


def init_models(*, force: bool = False) -> None:
    """
    Import every model module so string relationship targets resolve,
    then configure mappers once.
    """
    global _INITIALIZED
    if _INITIALIZED and not force:
        return

    for mod in _MODEL_MODULES:
        importlib.import_module(mod)

    configure_mappers()
    _INITIALIZED = True
    log.info("ORM models initialized (%d modules)", len(_MODEL_MODULES))
