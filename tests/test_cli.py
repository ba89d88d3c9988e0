# Copyright 2024 Daniel van Strien
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the CLI module."""

import io
import json
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from webhdfs_ha import __version__
from webhdfs_ha.cli._cli_utils import Scheme
from webhdfs_ha.cli.main import app
from webhdfs_ha.exceptions import RemoteError, UnavailableError
from webhdfs_ha.models import ContentSummary, DelegationToken, FileChecksum, FileStatus, RemoteException

runner = CliRunner()

NAMENODES = ["-n", "nn1:50070", "-n", "nn2:50070"]


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_help(self) -> None:
        """Test that --help works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "WebHDFS REST API" in result.stdout

    def test_version(self) -> None:
        """Test that --version works."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_no_args_shows_help(self) -> None:
        """Test that running without args shows help."""
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "Commands" in result.stdout


class TestLsCommand:
    """Test the ls command."""

    @patch("webhdfs_ha.cli.main._get_client")
    def test_ls_json(self, mock_get_client: MagicMock) -> None:
        """Test ls command with JSON output."""
        mock_client = MagicMock()
        mock_client.list_status.return_value = [
            FileStatus(path_suffix="a.txt", type="FILE", length=3, owner="hdfs", permission="644"),
        ]
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["ls", "/user/hdfs", *NAMENODES, "-u", "hdfs"])
        assert result.exit_code == 0

        output = json.loads(result.stdout)
        assert output[0]["path_suffix"] == "a.txt"
        assert output[0]["length"] == 3
        mock_get_client.assert_called_once_with(["nn1:50070", "nn2:50070"], "hdfs", False, Scheme.http)
        mock_client.list_status.assert_called_once_with("/user/hdfs")
        mock_client.close.assert_called_once()

    @patch("webhdfs_ha.cli.main._get_client")
    def test_ls_table(self, mock_get_client: MagicMock) -> None:
        """Test ls command with table output."""
        mock_client = MagicMock()
        mock_client.list_status.return_value = [
            FileStatus(path_suffix="logs", type="DIRECTORY", owner="hdfs", group="supergroup", permission="755"),
        ]
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["ls", "/", *NAMENODES, "--format", "table"])
        assert result.exit_code == 0
        assert "Permission" in result.stdout
        assert "logs" in result.stdout
        assert "supergroup" in result.stdout

    @patch("webhdfs_ha.cli.main._get_client")
    def test_ls_empty_table(self, mock_get_client: MagicMock) -> None:
        """Test ls command on an empty directory."""
        mock_client = MagicMock()
        mock_client.list_status.return_value = []
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["ls", "/empty", *NAMENODES, "-f", "table"])
        assert result.exit_code == 0
        assert "No data" in result.stdout

    @patch("webhdfs_ha.cli.main._get_client")
    def test_ls_remote_error(self, mock_get_client: MagicMock) -> None:
        """Test ls command with a server side exception."""
        mock_client = MagicMock()
        mock_client.list_status.side_effect = RemoteError(
            RemoteException(exception="FileNotFoundException", message="File does not exist: /missing")
        )
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["ls", "/missing", *NAMENODES])
        assert result.exit_code == 1
        mock_client.close.assert_called_once()

    @patch("webhdfs_ha.cli.main._get_client")
    def test_ls_unavailable(self, mock_get_client: MagicMock) -> None:
        """Test ls command when no NameNode is active."""
        mock_get_client.side_effect = UnavailableError("No active NameNode among: nn1:50070, nn2:50070")

        result = runner.invoke(app, ["ls", "/", *NAMENODES])
        assert result.exit_code == 1

    @patch("webhdfs_ha.cli.main._get_client")
    def test_ls_kerberos_fetches_token(self, mock_get_client: MagicMock) -> None:
        """Test that --kerberos authenticates data requests with a token."""
        mock_client = MagicMock()
        mock_client.list_status.return_value = []
        mock_get_client.return_value = mock_client

        result = runner.invoke(
            app, ["ls", "/", *NAMENODES, "--kerberos", "--scheme", "https"], env={"HADOOP_USER_NAME": None}
        )
        assert result.exit_code == 0
        mock_get_client.assert_called_once_with(["nn1:50070", "nn2:50070"], None, True, Scheme.https)
        mock_client.get_delegation_token.assert_called_once_with()

    @patch("webhdfs_ha.cli.main._get_client")
    def test_namenodes_from_env(self, mock_get_client: MagicMock) -> None:
        """Test that WEBHDFS_NAMENODES provides the NameNodes."""
        mock_client = MagicMock()
        mock_client.list_status.return_value = []
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["ls", "/"], env={"WEBHDFS_NAMENODES": "nn1:50070"})
        assert result.exit_code == 0
        assert mock_get_client.call_args.args[0] == ["nn1:50070"]


class TestRecordCommands:
    """Test the stat, checksum and summary commands."""

    @patch("webhdfs_ha.cli.main._get_client")
    def test_stat(self, mock_get_client: MagicMock) -> None:
        """Test stat command."""
        mock_client = MagicMock()
        mock_client.get_file_status.return_value = FileStatus(type="FILE", length=42, replication=3)
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["stat", "/a.txt", *NAMENODES])
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["length"] == 42
        assert output["replication"] == 3

    @patch("webhdfs_ha.cli.main._get_client")
    def test_stat_table(self, mock_get_client: MagicMock) -> None:
        """Test stat command with table output."""
        mock_client = MagicMock()
        mock_client.get_file_status.return_value = FileStatus(type="FILE", length=42)
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["stat", "/a.txt", *NAMENODES, "-f", "table"])
        assert result.exit_code == 0
        assert "Field" in result.stdout
        assert "42" in result.stdout

    @patch("webhdfs_ha.cli.main._get_client")
    def test_checksum(self, mock_get_client: MagicMock) -> None:
        """Test checksum command."""
        mock_client = MagicMock()
        mock_client.get_file_checksum.return_value = FileChecksum(
            algorithm="MD5-of-1MD5-of-512CRC32", checksum_bytes="eadb10de", length=28
        )
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["checksum", "/a.txt", *NAMENODES])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["algorithm"] == "MD5-of-1MD5-of-512CRC32"

    @patch("webhdfs_ha.cli.main._get_client")
    def test_summary(self, mock_get_client: MagicMock) -> None:
        """Test summary command."""
        mock_client = MagicMock()
        mock_client.get_content_summary.return_value = ContentSummary(directory_count=2, file_count=1, length=24930)
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["summary", "/user", *NAMENODES])
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["file_count"] == 1
        assert output["quota"] == -1


class TestCatCommand:
    """Test the cat command."""

    @patch("webhdfs_ha.cli.main._get_client")
    def test_cat(self, mock_get_client: MagicMock) -> None:
        """Test that file content is copied to stdout."""
        mock_client = MagicMock()
        mock_client.open.return_value = io.BytesIO(b"hello\nworld\n")
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["cat", "/a.txt", *NAMENODES, "--offset", "6", "--length", "5"])
        assert result.exit_code == 0
        assert result.stdout_bytes == b"hello\nworld\n"
        mock_client.open.assert_called_once_with("/a.txt", offset=6, length=5)

    @patch("webhdfs_ha.cli.main._get_client")
    def test_cat_closes_stream(self, mock_get_client: MagicMock) -> None:
        """Test that the stream is closed after copying."""
        stream = io.BytesIO(b"data")
        mock_client = MagicMock()
        mock_client.open.return_value = stream
        mock_get_client.return_value = mock_client

        runner.invoke(app, ["cat", "/a.txt", *NAMENODES])
        assert stream.closed


class TestTokenCommands:
    """Test the token sub-commands."""

    @patch("webhdfs_ha.cli.main._get_client")
    def test_token_get(self, mock_get_client: MagicMock) -> None:
        """Test token get command."""
        mock_client = MagicMock()
        mock_client.get_delegation_token.return_value = DelegationToken(value="tok1")
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["token", "get", *NAMENODES, "-k", "--renewer", "yarn"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"token": "tok1"}
        mock_client.get_delegation_token.assert_called_once_with(renewer="yarn")

    @patch("webhdfs_ha.cli.main._get_client")
    def test_token_renew(self, mock_get_client: MagicMock) -> None:
        """Test token renew command."""
        mock_client = MagicMock()
        mock_client.renew_delegation_token.return_value = 1320962673997
        mock_get_client.return_value = mock_client

        result = runner.invoke(app, ["token", "renew", "tok1", *NAMENODES, "-k"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"expiration": 1320962673997}
        mock_client.renew_delegation_token.assert_called_once_with("tok1")
        mock_client.get_delegation_token.assert_not_called()
