"""Request and response models for the WebHDFS HA client."""

import time
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Operation(str, Enum):
    """WebHDFS operation codes."""

    OPEN = "OPEN"
    CREATE = "CREATE"
    APPEND = "APPEND"
    CONCAT = "CONCAT"
    RENAME = "RENAME"
    DELETE = "DELETE"
    SETPERMISSION = "SETPERMISSION"
    SETOWNER = "SETOWNER"
    SETREPLICATION = "SETREPLICATION"
    SETTIMES = "SETTIMES"
    MKDIRS = "MKDIRS"
    CREATESYMLINK = "CREATESYMLINK"
    LISTSTATUS = "LISTSTATUS"
    GETFILESTATUS = "GETFILESTATUS"
    GETCONTENTSUMMARY = "GETCONTENTSUMMARY"
    GETFILECHECKSUM = "GETFILECHECKSUM"
    GETDELEGATIONTOKEN = "GETDELEGATIONTOKEN"
    GETDELEGATIONTOKENS = "GETDELEGATIONTOKENS"
    RENEWDELEGATIONTOKEN = "RENEWDELEGATIONTOKEN"
    CANCELDELEGATIONTOKEN = "CANCELDELEGATIONTOKEN"


class HAState(str, Enum):
    """Liveness state of a NameNode."""

    UNKNOWN = "unknown"
    ACTIVE = "active"
    STANDBY = "standby"


class Endpoint(BaseModel):
    """A configured NameNode HTTP address and its last observed HA state."""

    model_config = ConfigDict(frozen=True)

    address: str
    state: HAState = HAState.UNKNOWN


class OperationRequest(BaseModel):
    """Descriptor of a single WebHDFS call.

    Zero numeric fields and empty auth fields mean "absent" and are left out
    of the request URL.
    """

    op: Operation
    path: str = ""
    offset: int = Field(default=0, ge=0)
    length: int = Field(default=0, ge=0)
    buffer_size: int = Field(default=0, ge=0)
    delegation: Optional[str] = None
    user_name: Optional[str] = None


class RequestTarget(BaseModel):
    """HTTP method and fully built URL for an operation."""

    method: str
    url: str


class DelegationToken(BaseModel):
    """A delegation token and its absolute expiration time.

    ``expires_at`` is a POSIX timestamp in seconds; it is ``None`` until the
    first successful renewal reports it.
    """

    value: str
    expires_at: Optional[float] = None

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False
        return (time.time() if now is None else now) >= self.expires_at


# =============================================================================
# Response payloads
# =============================================================================


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class FileStatus(_Record):
    """Response model for a file or directory status."""

    access_time: int = Field(default=0, alias="accessTime")
    block_size: int = Field(default=0, alias="blockSize")
    group: str = ""
    length: int = 0
    modification_time: int = Field(default=0, alias="modificationTime")
    owner: str = ""
    path_suffix: str = Field(default="", alias="pathSuffix")
    permission: str = ""
    replication: int = 0
    type: str = ""


class FileStatuses(_Record):
    """Container of a directory listing."""

    file_status: List[FileStatus] = Field(default_factory=list, alias="FileStatus")


class FileChecksum(_Record):
    """Response model for a file checksum."""

    algorithm: str
    checksum_bytes: str = Field(alias="bytes")
    length: int


class ContentSummary(_Record):
    """Response model for a directory content summary."""

    directory_count: int = Field(default=0, alias="directoryCount")
    file_count: int = Field(default=0, alias="fileCount")
    length: int = 0
    quota: int = -1
    space_consumed: int = Field(default=0, alias="spaceConsumed")
    space_quota: int = Field(default=-1, alias="spaceQuota")


class Token(_Record):
    """Response model for a delegation token."""

    url_string: str = Field(alias="urlString")


class Tokens(_Record):
    """Container of delegation tokens."""

    token: List[Token] = Field(default_factory=list, validation_alias=AliasChoices("token", "Token"))


class RemoteException(_Record):
    """Server-side exception reported inside a response body."""

    exception: str = ""
    java_class_name: str = Field(default="", alias="javaClassName")
    message: str = ""


class RemoteExceptionEnvelope(_Record):
    """Only the RemoteException of a response, decoded on its own."""

    remote_exception: Optional[RemoteException] = Field(default=None, alias="RemoteException")


class ResponseEnvelope(_Record):
    """Decoded WebHDFS JSON response.

    At most one field is populated by a well-behaved server.
    """

    boolean: Optional[bool] = None
    long: Optional[int] = None
    file_status: Optional[FileStatus] = Field(default=None, alias="FileStatus")
    file_statuses: Optional[FileStatuses] = Field(default=None, alias="FileStatuses")
    file_checksum: Optional[FileChecksum] = Field(default=None, alias="FileChecksum")
    content_summary: Optional[ContentSummary] = Field(default=None, alias="ContentSummary")
    token: Optional[Token] = Field(default=None, alias="Token")
    tokens: Optional[Tokens] = Field(default=None, alias="Tokens")
    remote_exception: Optional[RemoteException] = Field(default=None, alias="RemoteException")


class JmxBean(_Record):
    ha_state: Optional[str] = Field(default=None, alias="tag.HAState")


class JmxResponse(_Record):
    """Response of the NameNode JMX HA state query."""

    beans: List[JmxBean] = Field(default_factory=list)
