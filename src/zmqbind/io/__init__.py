# This package wraps the primitives exported by the native libzmq library and provides managed contexts, sockets and
# messages on top of them

__all__ = [
    "Context",
    "Socket",
    "Message",
    "PollItem",
    "SocketType",
    "SocketOption",
    "OptionEncoding",
    "Flag",
    "PollEvent",
    "ErrorCode",
    "ZMQBindError",
    "ZMQBindInvariantError",
    "UnknownErrorCodeError",
    "UnknownSocketTypeError",
    "LibraryNotFoundError",
    "init",
    "poll",
    "version",
    "configure",
    "translate_errno",
]

from zmqbind.io.constants import Flag, OptionEncoding, PollEvent, SocketOption, SocketType
from zmqbind.io.context import Context, init
from zmqbind.io.error import (
    ErrorCode,
    UnknownErrorCodeError,
    UnknownSocketTypeError,
    ZMQBindError,
    ZMQBindInvariantError,
    translate_errno,
)
from zmqbind.io.library import LibraryNotFoundError, configure, version
from zmqbind.io.message import Message
from zmqbind.io.poll import PollItem, poll
from zmqbind.io.socket import Socket
