"""Central logging configuration for the library."""
from __future__ import annotations

import logging
import os
from typing import Optional

_LEVEL_ENV = "PPTX_RENDERER_LOG_LEVEL"
_DEFAULT_LEVEL = logging.INFO


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger, configuring the root logger on first use."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        name_from_env = os.environ.get(_LEVEL_ENV, "").upper()
        level = logging.getLevelName(name_from_env) if name_from_env else _DEFAULT_LEVEL
        if not isinstance(level, int):
            level = _DEFAULT_LEVEL
        logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    return logger
