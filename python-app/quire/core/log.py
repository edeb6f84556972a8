"""
Logging setup for the application entry point.

Library modules only create their own ``logging.getLogger(__name__)``;
handlers are installed here, once, by the running application.
"""

import logging
import os
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LEVEL_ENV = "QUIRE_LOG_LEVEL"


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Configures root logging.

    Args:
        level: Explicit level name or number. When omitted the level comes
            from the QUIRE_LOG_LEVEL environment variable, else INFO.
    """
    if level is None:
        level = os.environ.get(LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
