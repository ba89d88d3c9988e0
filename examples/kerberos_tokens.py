"""Delegation token usage on a Kerberos secured cluster.

Requires a valid ticket (run ``kinit`` first).
"""

import logging
import os
import time

from webhdfs_ha import WebHDFSClient


def main():
    """Keep a delegation token alive while polling a directory."""
    logging.basicConfig(level=logging.INFO)
    namenodes = os.getenv("WEBHDFS_NAMENODES", "nn1:9870,nn2:9870")

    # The token is acquired now and renewed in the background until close()
    with WebHDFSClient(namenodes, kerberos=True, auto_token=True) as client:
        print(f"Using delegation token {client.delegation_token.value[:16]}...")

        for _ in range(3):
            statuses = client.list_status("/tmp")
            print(f"{len(statuses)} entries in /tmp via {client.active_namenode.address}")
            time.sleep(5)

        expiration = client.renew_delegation_token()
        print(f"Token now expires at {time.ctime(expiration / 1000)}")


if __name__ == "__main__":
    main()
