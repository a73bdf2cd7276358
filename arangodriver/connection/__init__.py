"""Transport layer: requests, responses, endpoints, authentication and wrappers."""

from arangodriver.connection.auth import (
    BasicAuthentication,
    HeaderAuthentication,
    JWTAuthentication,
    bearer_authentication,
)
from arangodriver.connection.base import Connection, ConnectionWrapper
from arangodriver.connection.call import (
    RequestModifier,
    call,
    call_delete,
    call_get,
    call_head,
    call_patch,
    call_post,
    call_put,
    escape,
    new_url,
    with_body,
    with_fragment,
    with_header,
    with_query,
    with_raw_body,
    with_transaction_id,
)
from arangodriver.connection.context import (
    async_job,
    async_request,
    max_queue_time,
    use_queue_timeout,
)
from arangodriver.connection.endpoints import (
    Endpoint,
    RoundRobinEndpoints,
    fixup_endpoint_url_scheme,
    is_same_endpoint,
)
from arangodriver.connection.http import ConnectionConfig, HttpConnection
from arangodriver.connection.request import Request, Response
from arangodriver.connection.wrappers import AsyncConnection, RetryConnection, retry_on_503

__all__ = [
    "AsyncConnection",
    "BasicAuthentication",
    "Connection",
    "ConnectionConfig",
    "ConnectionWrapper",
    "Endpoint",
    "HeaderAuthentication",
    "HttpConnection",
    "JWTAuthentication",
    "Request",
    "RequestModifier",
    "Response",
    "RetryConnection",
    "RoundRobinEndpoints",
    "async_job",
    "async_request",
    "bearer_authentication",
    "call",
    "call_delete",
    "call_get",
    "call_head",
    "call_patch",
    "call_post",
    "call_put",
    "escape",
    "fixup_endpoint_url_scheme",
    "is_same_endpoint",
    "max_queue_time",
    "new_url",
    "retry_on_503",
    "use_queue_timeout",
    "with_body",
    "with_fragment",
    "with_header",
    "with_query",
    "with_raw_body",
    "with_transaction_id",
]
