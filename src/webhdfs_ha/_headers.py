"""Header and identity helpers.

This module builds the User-Agent header sent with every request and
resolves the user name used for simple authentication.
"""

import os
import platform
import sys
from typing import Dict, Optional

from .__version__ import __version__

# Library identification
LIBRARY_NAME = "webhdfs-ha-py"


def build_headers(
    *,
    library_name: str = LIBRARY_NAME,
    library_version: Optional[str] = None,
) -> Dict[str, str]:
    """Build default HTTP headers.

    Creates headers with a user-agent string that includes library name,
    version, Python version, and platform information.

    Args:
        library_name: Name of the library making the request.
        library_version: Version of the library. Defaults to package version.

    Returns:
        Dictionary of HTTP headers.

    Example:
        >>> headers = build_headers()
        >>> print(headers["user-agent"])
        webhdfs-ha-py/0.1.0; python/3.11.4; linux/6.1.0
    """
    if library_version is None:
        library_version = __version__

    python_version = ".".join(map(str, sys.version_info[:3]))
    os_name = platform.system().lower()

    user_agent = f"{library_name}/{library_version}; python/{python_version}; {os_name}/{platform.release()}"

    return {"user-agent": user_agent}


def get_user_name_to_send(user_name: Optional[str] = None) -> Optional[str]:
    """Get the user name for simple authentication.

    An explicit user name wins, then the ``HADOOP_USER_NAME`` environment
    variable. Read at call time so a changed environment is honoured.

    Args:
        user_name: Explicitly provided user name.

    Returns:
        User name if available, None otherwise.
    """
    if user_name:
        return user_name
    return os.environ.get("HADOOP_USER_NAME") or None
