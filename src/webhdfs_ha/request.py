"""Request construction for WebHDFS operations.

Every supported operation has one template: the HTTP method, whether the
file system path is part of the URL, and an ordered list of query fields.
A field is written only when its value is present (non-zero, non-empty),
unless the template marks it as always written.
"""

from typing import Callable, Dict, List, NamedTuple, Optional, Tuple
from urllib.parse import quote, urlencode

from .constants import WEBHDFS_PATH
from .exceptions import UnsupportedOperationError
from .models import Operation, OperationRequest, RequestTarget
from .resolver import NameNodeResolver


class QueryField(NamedTuple):
    """A query parameter filled from an OperationRequest attribute."""

    name: str
    attr: str
    always: bool = False

    def value(self, request: OperationRequest) -> Optional[str]:
        """Return the rendered value, or None when the field is left out."""
        raw = getattr(request, self.attr)
        if not raw and not self.always:
            return None
        return "" if raw is None else str(raw)


class OperationTemplate(NamedTuple):
    method: str
    fields: Tuple[QueryField, ...]
    with_path: bool = True


_AUTH_FIELDS = (
    QueryField("delegation", "delegation"),
    QueryField("user.name", "user_name"),
)

TEMPLATES: Dict[Operation, OperationTemplate] = {
    Operation.OPEN: OperationTemplate(
        "GET",
        (
            QueryField("offset", "offset"),
            QueryField("length", "length"),
            QueryField("buffersize", "buffer_size"),
        )
        + _AUTH_FIELDS,
    ),
    Operation.GETFILESTATUS: OperationTemplate("GET", _AUTH_FIELDS),
    Operation.LISTSTATUS: OperationTemplate("GET", _AUTH_FIELDS),
    Operation.GETFILECHECKSUM: OperationTemplate("GET", _AUTH_FIELDS),
    Operation.GETCONTENTSUMMARY: OperationTemplate("GET", _AUTH_FIELDS),
    Operation.GETDELEGATIONTOKEN: OperationTemplate(
        "GET", (QueryField("renewer", "user_name"),), with_path=False
    ),
    Operation.RENEWDELEGATIONTOKEN: OperationTemplate(
        "PUT", (QueryField("token", "delegation", always=True),), with_path=False
    ),
}


def get_template(op: Operation) -> OperationTemplate:
    """Look up the template of an operation.

    Raises:
        UnsupportedOperationError: If the operation has no template.
    """
    template = TEMPLATES.get(op)
    if template is None:
        raise UnsupportedOperationError(f"Unsupported operation: {getattr(op, 'value', op)}")
    return template


def render_query(template: OperationTemplate, request: OperationRequest) -> List[Tuple[str, str]]:
    """Render the ordered query parameters of a request, ``op`` first."""
    query = [("op", request.op.value)]
    for field in template.fields:
        value = field.value(request)
        if value is not None:
            query.append((field.name, value))
    return query


def render_url(scheme: str, address: str, template: OperationTemplate, request: OperationRequest) -> str:
    """Render the full request URL against a NameNode address."""
    base = f"{scheme}://{address}{WEBHDFS_PATH}/"
    path = request.path.strip("/")
    if template.with_path and path:
        base += f"{quote(path)}/"
    return f"{base}?{urlencode(render_query(template, request))}"


class RequestBuilder:
    """Build request targets against the currently active NameNode.

    Auth material is chosen at build time: with token-based auth the current
    delegation token is attached, otherwise the plain user name, otherwise
    nothing. Fields already set on the request are left alone.

    Args:
        resolver: Resolver giving the endpoint to address.
        token_source: Callable returning the current usable delegation token,
            or None. Passing it enables token-based auth.
        user_name: User name for simple authentication.
    """

    def __init__(
        self,
        resolver: NameNodeResolver,
        token_source: Optional[Callable[[], Optional[str]]] = None,
        user_name: Optional[str] = None,
    ):
        self._resolver = resolver
        self._token_source = token_source
        self.user_name = user_name

    def with_auth(self, request: OperationRequest) -> OperationRequest:
        if self._token_source is not None:
            if request.delegation is None:
                return request.model_copy(update={"delegation": self._token_source()})
        elif self.user_name and request.user_name is None:
            return request.model_copy(update={"user_name": self.user_name})
        return request

    def build(self, request: OperationRequest) -> RequestTarget:
        """Build the method and URL of a request.

        The template is checked before the endpoint is resolved, so an
        unsupported operation never causes network traffic.

        Raises:
            UnsupportedOperationError: If the operation has no template.
            UnavailableError: If no active NameNode can be found.
        """
        template = get_template(request.op)
        request = self.with_auth(request)
        endpoint = self._resolver.resolve()
        return RequestTarget(
            method=template.method,
            url=render_url(self._resolver.scheme, endpoint.address, template, request),
        )
