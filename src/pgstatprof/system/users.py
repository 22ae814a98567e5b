"""
Lookup of the operating-system user running the profiler.
"""

import logging

import psutil

logger = logging.getLogger(__name__)


def get_current_username() -> str:
    """Return the login name of the user owning this process.

    On Windows psutil reports ``DOMAIN\\user``; only the user part is kept.

    Raises:
        psutil.Error: If the process owner cannot be determined.
    """
    username = psutil.Process().username()
    if "\\" in username:
        username = username.rsplit("\\", 1)[1]
    logger.debug(f"Resolved current OS user: {username}")
    return username
