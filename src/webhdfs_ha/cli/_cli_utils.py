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
"""CLI utilities and shared type annotations for the webhdfs-ha CLI."""

from enum import Enum
from typing import Annotated, List, Optional

import typer

from webhdfs_ha.constants import NAMENODES_ENV_VAR


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    table = "table"


class Scheme(str, Enum):
    """URL scheme of the NameNode HTTP endpoints."""

    http = "http"
    https = "https"


def typer_factory(**kwargs: object) -> typer.Typer:
    """Create a Typer app with consistent settings for scriptable output.

    Disables Rich markup and pretty exceptions to ensure clean, parseable output.
    """
    return typer.Typer(
        rich_markup_mode=None,
        pretty_exceptions_enable=False,
        **kwargs,
    )


# Reusable type annotations for CLI options and arguments

PathArg = Annotated[
    str,
    typer.Argument(
        help="Absolute HDFS path (e.g., '/user/hdfs/data.csv').",
    ),
]

NameNodeOpt = Annotated[
    List[str],
    typer.Option(
        "--namenode",
        "-n",
        help="NameNode HTTP address 'host:port'. Repeat for HA, in priority order.",
        envvar=NAMENODES_ENV_VAR,
    ),
]

UserOpt = Annotated[
    Optional[str],
    typer.Option(
        "--user",
        "-u",
        help="User name for simple authentication.",
        envvar="HADOOP_USER_NAME",
    ),
]

KerberosOpt = Annotated[
    bool,
    typer.Option(
        "--kerberos",
        "-k",
        help="Authenticate with Kerberos (SPNEGO) and use a delegation token.",
    ),
]

SchemeOpt = Annotated[
    Scheme,
    typer.Option(
        "--scheme",
        help="URL scheme of the NameNode endpoints.",
    ),
]

FormatOpt = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format.",
    ),
]

OffsetOpt = Annotated[
    int,
    typer.Option(
        "--offset",
        "-o",
        min=0,
        help="Byte offset to start reading from.",
    ),
]

LengthOpt = Annotated[
    int,
    typer.Option(
        "--length",
        "-l",
        min=0,
        help="Number of bytes to read, 0 for the rest of the file.",
    ),
]
