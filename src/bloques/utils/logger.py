"""Logger lookup for Bloques modules.

Every logger lives under the ``bloques`` namespace so hosts can tune the
whole engine with one ``logging.getLogger("bloques")`` call. The package
root only carries a ``NullHandler``; output is up to the host.

Example:
    >>> from bloques.utils.logger import get_logger
    >>> get_logger("arbiter").name
    'bloques.arbiter'
"""

from __future__ import annotations

import logging

ROOT = "bloques"

logging.getLogger(ROOT).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, nested under ``bloques.`` if it is not already."""
    if name != ROOT and not name.startswith(ROOT + "."):
        name = f"{ROOT}.{name}"
    return logging.getLogger(name)
