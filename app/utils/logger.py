"""
Logging configuration.

Imported once by ``app.main`` so every module logger inherits the same
format and level.
"""

import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)

# httpx logs every request at INFO, which drowns out the planner summaries
logging.getLogger("httpx").setLevel(logging.WARNING)
