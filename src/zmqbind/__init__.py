from zmqbind.about import __version__
from zmqbind.io import (
    Context,
    ErrorCode,
    Flag,
    LibraryNotFoundError,
    Message,
    OptionEncoding,
    PollEvent,
    PollItem,
    Socket,
    SocketOption,
    SocketType,
    UnknownErrorCodeError,
    UnknownSocketTypeError,
    ZMQBindError,
    ZMQBindInvariantError,
    configure,
    init,
    poll,
    translate_errno,
    version,
)

assert isinstance(__version__, str)
