"""Basic usage examples for the WebHDFS HA client."""

import os

from webhdfs_ha import RemoteError, WebHDFSClient


def main():
    """Demonstrate basic usage against an HA pair of NameNodes."""
    namenodes = os.getenv("WEBHDFS_NAMENODES", "nn1:9870,nn2:9870")

    with WebHDFSClient(namenodes, user_name="hdfs") as client:
        print(f"Active NameNode: {client.active_namenode.address}")
        print()

        # List the home directory
        print("Contents of /user/hdfs:")
        for status in client.list_status("/user/hdfs"):
            kind = "d" if status.type == "DIRECTORY" else "-"
            print(f"  {kind}{status.permission:>4} {status.owner:<10} {status.length:>12} {status.path_suffix}")
        print()

        # Summarize usage
        summary = client.get_content_summary("/user/hdfs")
        print(f"Directories: {summary.directory_count}, files: {summary.file_count}, bytes: {summary.length}")
        print()

        # Read the head of a file
        try:
            stream = client.open("/user/hdfs/README.txt", length=200)
        except RemoteError as e:
            print(f"Cannot open file: {e.exception}: {e.message}")
            return
        try:
            print(stream.read().decode("utf-8", errors="replace"))
        finally:
            stream.close()


if __name__ == "__main__":
    main()
