"""restwire: typed request/response messages over an httpx transport.

A Message pairs a request strategy (how the outgoing body is produced)
with a response strategy (how the incoming body is consumed). Client.send()
dispatches a message and returns the status code, leaving the populated
response on the message.
"""

from restwire.cancellation import CancellationToken
from restwire.client import Client
from restwire.content import Content
from restwire.errors import (
    InvalidArgumentError,
    InvalidStateError,
    OperationCancelledError,
    RestWireError,
    SerializationError,
)
from restwire.headers import HeaderCollection
from restwire.message import Message, MessageState
from restwire.request import (
    EmptyRequest,
    FormUrlEncodedRequest,
    JsonRequest,
    Request,
    StringRequest,
)
from restwire.response import (
    EmptyResponse,
    HeadResponse,
    JsonResponse,
    Response,
    StreamResponse,
    StringResponse,
)
from restwire.serialization import JsonOptions

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "Client",
    "Content",
    "EmptyRequest",
    "EmptyResponse",
    "FormUrlEncodedRequest",
    "HeadResponse",
    "HeaderCollection",
    "InvalidArgumentError",
    "InvalidStateError",
    "JsonOptions",
    "JsonRequest",
    "JsonResponse",
    "Message",
    "MessageState",
    "OperationCancelledError",
    "Request",
    "Response",
    "RestWireError",
    "SerializationError",
    "StreamResponse",
    "StringRequest",
    "StringResponse",
]
