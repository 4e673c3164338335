# Native constants mirrored from zmq.h (libzmq 4.x). These values are passed verbatim to the native layer and must
# never be renumbered.

import enum


class SocketType(enum.IntEnum):
    PAIR = 0
    PUB = 1
    SUB = 2
    REQ = 3
    REP = 4
    DEALER = 5
    ROUTER = 6
    PULL = 7
    PUSH = 8
    XPUB = 9
    XSUB = 10


class Flag(enum.IntFlag):
    NONE = 0
    DONTWAIT = 1
    SNDMORE = 2


class PollEvent(enum.IntFlag):
    NONE = 0
    POLLIN = 1
    POLLOUT = 2
    POLLERR = 4


class ContextOption(enum.IntEnum):
    IO_THREADS = 1
    MAX_SOCKETS = 2


class OptionEncoding(enum.Enum):
    INT = "int"
    INT64 = "int64"
    UINT64 = "uint64"
    BYTES = "bytes"


class SocketOption(enum.IntEnum):
    """Socket option tags, each carrying the width the native layer expects its value in"""

    encoding: OptionEncoding

    def __new__(cls, value: int, encoding: OptionEncoding):
        obj = int.__new__(cls, value)
        obj._value_ = value
        obj.encoding = encoding
        return obj

    AFFINITY = 4, OptionEncoding.UINT64
    IDENTITY = 5, OptionEncoding.BYTES
    SUBSCRIBE = 6, OptionEncoding.BYTES
    UNSUBSCRIBE = 7, OptionEncoding.BYTES
    RATE = 8, OptionEncoding.INT
    RECOVERY_IVL = 9, OptionEncoding.INT
    SNDBUF = 11, OptionEncoding.INT
    RCVBUF = 12, OptionEncoding.INT
    RCVMORE = 13, OptionEncoding.INT
    FD = 14, OptionEncoding.INT
    EVENTS = 15, OptionEncoding.INT
    TYPE = 16, OptionEncoding.INT
    LINGER = 17, OptionEncoding.INT
    RECONNECT_IVL = 18, OptionEncoding.INT
    BACKLOG = 19, OptionEncoding.INT
    RECONNECT_IVL_MAX = 21, OptionEncoding.INT
    MAXMSGSIZE = 22, OptionEncoding.INT64
    SNDHWM = 23, OptionEncoding.INT
    RCVHWM = 24, OptionEncoding.INT
    MULTICAST_HOPS = 25, OptionEncoding.INT
    RCVTIMEO = 27, OptionEncoding.INT
    SNDTIMEO = 28, OptionEncoding.INT
    LAST_ENDPOINT = 32, OptionEncoding.BYTES
    ROUTER_MANDATORY = 33, OptionEncoding.INT
    TCP_KEEPALIVE = 34, OptionEncoding.INT
    IMMEDIATE = 39, OptionEncoding.INT
    IPV6 = 42, OptionEncoding.INT


# the identity is at most 255 bytes, the last endpoint can be a long ipc path
MAX_BYTES_OPTION_SIZE = 1024
