"""Integration tests for the WebHDFS client.

These tests talk to a real HDFS cluster. They are skipped by default and can
be run with:
    WEBHDFS_NAMENODES=nn1:9870,nn2:9870 INTEGRATION_TESTS=1 pytest -m integration

Set HADOOP_USER_NAME to pick the user for simple authentication.
"""

import os

import pytest

from webhdfs_ha import FileStatus, RemoteError, WebHDFSClient

NAMENODES = os.getenv("WEBHDFS_NAMENODES", "")

# Skip all integration tests if INTEGRATION_TESTS env var is not set
pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.getenv("INTEGRATION_TESTS", "0") != "1" or not NAMENODES,
        reason="Integration tests are disabled. Set INTEGRATION_TESTS=1 and WEBHDFS_NAMENODES to run them.",
    ),
]


class TestIntegrationSync:
    """Integration tests for synchronous client."""

    def setup_method(self):
        """Set up test client."""
        self.client = WebHDFSClient(NAMENODES)

    def teardown_method(self):
        """Close test client."""
        self.client.close()

    def test_active_namenode(self):
        """Test that one of the configured NameNodes is selected."""
        assert self.client.active_namenode is not None
        assert self.client.active_namenode.address in self.client.namenodes

    def test_list_root(self):
        """Test listing the root directory."""
        statuses = self.client.list_status("/")

        assert isinstance(statuses, list)
        assert all(isinstance(s, FileStatus) for s in statuses)
        assert all(s.type in ("FILE", "DIRECTORY", "SYMLINK") for s in statuses)

    def test_root_status(self):
        """Test the status of the root directory."""
        status = self.client.get_file_status("/")
        assert status.type == "DIRECTORY"

    def test_content_summary(self):
        """Test the content summary of the root directory."""
        summary = self.client.get_content_summary("/")
        assert summary.directory_count >= 1

    def test_missing_path(self):
        """Test that a missing path raises RemoteError."""
        with pytest.raises(RemoteError) as exc_info:
            self.client.get_file_status("/this/path/should/not/exist/webhdfs-ha")

        assert exc_info.value.exception == "FileNotFoundException"
        assert exc_info.value.status_code == 404

    def test_open_first_file(self):
        """Test reading the head of the first file found under /."""
        files = [s for s in self.client.list_status("/") if s.type == "FILE"]
        if not files:
            pytest.skip("No file in the root directory")

        stream = self.client.open(f"/{files[0].path_suffix}", length=16)
        try:
            data = stream.read()
        finally:
            stream.close()
        assert len(data) <= 16
