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
"""CLI for browsing HDFS through the WebHDFS REST API.

With several `--namenode` options the active NameNode is found through JMX,
so the same command line keeps working across a failover.
"""

import json
import shutil
import sys
from contextlib import contextmanager
from typing import Annotated, Iterator, List, Optional

import typer

from webhdfs_ha import __version__
from webhdfs_ha.cli._cli_utils import (
    FormatOpt,
    KerberosOpt,
    LengthOpt,
    NameNodeOpt,
    OffsetOpt,
    OutputFormat,
    PathArg,
    Scheme,
    SchemeOpt,
    UserOpt,
    typer_factory,
)
from webhdfs_ha.client import WebHDFSClient
from webhdfs_ha.exceptions import RemoteError, WebHDFSError

app = typer_factory(
    help="Browse HDFS through the WebHDFS REST API.",
)
token_app = typer_factory(help="Manage delegation tokens.")
app.add_typer(token_app, name="token")


def _get_client(
    namenodes: List[str],
    user: Optional[str] = None,
    kerberos: bool = False,
    scheme: Scheme = Scheme.http,
) -> WebHDFSClient:
    """Create a client instance."""
    return WebHDFSClient(",".join(namenodes), user_name=user, kerberos=kerberos, scheme=scheme.value)


@contextmanager
def _open_client(
    namenodes: List[str],
    user: Optional[str] = None,
    kerberos: bool = False,
    scheme: Scheme = Scheme.http,
    with_token: bool = True,
) -> Iterator[WebHDFSClient]:
    """Yield a client, authenticated for data requests, and close it afterwards."""
    client = _get_client(namenodes, user, kerberos, scheme)
    try:
        if kerberos and with_token:
            client.get_delegation_token()
        yield client
    finally:
        client.close()


def _output_json(data: object) -> None:
    """Output data as JSON."""
    print(json.dumps(data, indent=2, default=str))


def _output_table(headers: list[str], rows: list[list[object]]) -> None:
    """Output data as a simple table."""
    if not rows:
        print("No data")
        return

    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print(" | ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row)))


def _output_record(data: dict) -> None:
    """Output a single record as a two-column table."""
    _output_table(["Field", "Value"], [[k, v] for k, v in data.items()])


def _handle_error(e: Exception) -> None:
    """Handle errors and exit with appropriate code."""
    if isinstance(e, RemoteError):
        error_data = {"error": "RemoteError", "exception": e.exception, "message": e.message}
    elif isinstance(e, WebHDFSError):
        error_data = {"error": type(e).__name__, "message": str(e)}
    else:
        error_data = {"error": "Error", "message": str(e)}

    print(json.dumps(error_data), file=sys.stderr)
    raise typer.Exit(code=1)


@app.command("ls")
def ls(
    path: PathArg,
    namenode: NameNodeOpt = [],
    user: UserOpt = None,
    kerberos: KerberosOpt = False,
    scheme: SchemeOpt = Scheme.http,
    format: FormatOpt = OutputFormat.json,
) -> None:
    """List the entries of a directory."""
    try:
        with _open_client(namenode, user, kerberos, scheme) as client:
            statuses = client.list_status(path)

        if format == OutputFormat.json:
            _output_json([s.model_dump() for s in statuses])
        else:
            headers = ["Type", "Permission", "Owner", "Group", "Size", "Name"]
            rows = [[s.type, s.permission, s.owner, s.group, s.length, s.path_suffix] for s in statuses]
            _output_table(headers, rows)
    except Exception as e:
        _handle_error(e)


@app.command("stat")
def stat(
    path: PathArg,
    namenode: NameNodeOpt = [],
    user: UserOpt = None,
    kerberos: KerberosOpt = False,
    scheme: SchemeOpt = Scheme.http,
    format: FormatOpt = OutputFormat.json,
) -> None:
    """Show the status of a file or directory."""
    try:
        with _open_client(namenode, user, kerberos, scheme) as client:
            status = client.get_file_status(path)

        if format == OutputFormat.json:
            _output_json(status.model_dump())
        else:
            _output_record(status.model_dump())
    except Exception as e:
        _handle_error(e)


@app.command("checksum")
def checksum(
    path: PathArg,
    namenode: NameNodeOpt = [],
    user: UserOpt = None,
    kerberos: KerberosOpt = False,
    scheme: SchemeOpt = Scheme.http,
    format: FormatOpt = OutputFormat.json,
) -> None:
    """Show the checksum of a file."""
    try:
        with _open_client(namenode, user, kerberos, scheme) as client:
            file_checksum = client.get_file_checksum(path)

        if format == OutputFormat.json:
            _output_json(file_checksum.model_dump())
        else:
            _output_record(file_checksum.model_dump())
    except Exception as e:
        _handle_error(e)


@app.command("summary")
def summary(
    path: PathArg,
    namenode: NameNodeOpt = [],
    user: UserOpt = None,
    kerberos: KerberosOpt = False,
    scheme: SchemeOpt = Scheme.http,
    format: FormatOpt = OutputFormat.json,
) -> None:
    """Show the content summary (counts, sizes, quotas) of a directory."""
    try:
        with _open_client(namenode, user, kerberos, scheme) as client:
            content_summary = client.get_content_summary(path)

        if format == OutputFormat.json:
            _output_json(content_summary.model_dump())
        else:
            _output_record(content_summary.model_dump())
    except Exception as e:
        _handle_error(e)


@app.command("cat")
def cat(
    path: PathArg,
    namenode: NameNodeOpt = [],
    user: UserOpt = None,
    kerberos: KerberosOpt = False,
    scheme: SchemeOpt = Scheme.http,
    offset: OffsetOpt = 0,
    length: LengthOpt = 0,
) -> None:
    """Write the content of a file to stdout."""
    try:
        with _open_client(namenode, user, kerberos, scheme) as client:
            stream = client.open(path, offset=offset, length=length)
            try:
                out = typer.get_binary_stream("stdout")
                shutil.copyfileobj(stream, out)
                out.flush()
            finally:
                stream.close()
    except Exception as e:
        _handle_error(e)


@token_app.command("get")
def token_get(
    namenode: NameNodeOpt = [],
    user: UserOpt = None,
    kerberos: KerberosOpt = False,
    scheme: SchemeOpt = Scheme.http,
    renewer: Annotated[
        Optional[str],
        typer.Option("--renewer", "-r", help="User allowed to renew the token."),
    ] = None,
) -> None:
    """Get a new delegation token."""
    try:
        with _open_client(namenode, user, kerberos, scheme, with_token=False) as client:
            token = client.get_delegation_token(renewer=renewer)
        _output_json({"token": token.value})
    except Exception as e:
        _handle_error(e)


@token_app.command("renew")
def token_renew(
    token: Annotated[
        str,
        typer.Argument(help="The delegation token to renew."),
    ],
    namenode: NameNodeOpt = [],
    user: UserOpt = None,
    kerberos: KerberosOpt = False,
    scheme: SchemeOpt = Scheme.http,
) -> None:
    """Renew a delegation token and print its new expiration time."""
    try:
        with _open_client(namenode, user, kerberos, scheme, with_token=False) as client:
            expiration = client.renew_delegation_token(token)
        _output_json({"expiration": expiration})
    except Exception as e:
        _handle_error(e)


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", help="Show version and exit."),
    ] = None,
) -> None:
    """Browse HDFS through the WebHDFS REST API."""
    if version:
        print(f"webhdfs-ha-py {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
