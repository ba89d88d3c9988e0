"""Constants for the WebHDFS HA client.

This module centralizes configuration values. Environment variables can be
used to override defaults.
"""

import os

# =============================================================================
# Endpoint Configuration
# =============================================================================

# Environment variable holding the NameNode HTTP addresses ("host:port") for the CLI
NAMENODES_ENV_VAR = "WEBHDFS_NAMENODES"

DEFAULT_SCHEME = "http"

WEBHDFS_PATH = "/webhdfs/v1"

# JMX query exposing the HA state of a NameNode
JMX_HA_STATE_PATH = "/jmx?get=Hadoop:service=NameNode,name=FSNamesystem::tag.HAState"

# =============================================================================
# Request Configuration
# =============================================================================

# Default timeout for API requests in seconds
DEFAULT_REQUEST_TIMEOUT = float(os.environ.get("WEBHDFS_TIMEOUT", "30.0"))

# Connection pool sizing for the shared requests session
DEFAULT_POOL_CONNECTIONS = 10
DEFAULT_POOL_MAXSIZE = (os.cpu_count() or 1) + 1

# =============================================================================
# Delegation Token Renewal
# =============================================================================

# Renew this long before the token expires (seconds)
TOKEN_RENEW_SAFETY_MARGIN = 30 * 60

# Upper bound of the uniform random jitter subtracted from the delay (seconds)
TOKEN_RENEW_MAX_JITTER = 10 * 60

# Linear backoff unit between failed renewals (seconds)
TOKEN_RENEW_BACKOFF = 10.0

# Consecutive renewal failures before a fresh token is acquired
TOKEN_RENEW_MAX_ATTEMPTS = 3
