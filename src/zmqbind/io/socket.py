import logging
import sys
from typing import TYPE_CHECKING, List, Sequence, Union

from zmqbind.config.types.zmq import ZMQConfig
from zmqbind.io import options
from zmqbind.io.constants import Flag, PollEvent, SocketOption, SocketType
from zmqbind.io.error import UnknownSocketTypeError, ZMQBindError, ZMQBindInvariantError, check_ptr, check_rc
from zmqbind.io.library import lib
from zmqbind.io.message import Message
from zmqbind.io.release import release_failed

if TYPE_CHECKING:
    from zmqbind.io.context import Context

Endpoint = Union[str, ZMQConfig]


class Socket:
    """Owns one native socket handle

    Sockets are created by Context.socket(). The handle is closed exactly once, either by close(), by leaving a
    `with` block, or when the object is garbage collected; later calls to close() do nothing. Operations on a closed
    socket fail with ENOTSOCK from the native layer.

    A socket must not be used from two threads at the same time.
    """

    def __init__(self, context: "Context", socket_type: SocketType) -> None:
        self._handle = None
        self._closed = True

        self._context = context
        self._socket_type = SocketType(socket_type)
        self._handle = check_ptr(lib().zmq_socket(context.handle, int(self._socket_type)))
        self._closed = False

    @property
    def handle(self):
        """Address of the native socket, None once closed"""
        return self._handle

    @property
    def context(self) -> "Context":
        return self._context

    @property
    def socket_type(self) -> SocketType:
        return self._socket_type

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        state = "closed" if self._closed else hex(self._handle)
        return f"{self.__class__.__name__}({self._socket_type.name}, {state})"

    def __enter__(self) -> "Socket":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __del__(self):
        if getattr(self, "_closed", True):
            return

        try:
            self.close()
        except (ZMQBindError, ZMQBindInvariantError) as e:
            release_failed(repr(self), e)

    def close(self) -> None:
        if self._closed:
            return

        handle = self._handle

        # the flag is set first, a failed native close is reported once and never retried
        self._closed = True
        self._handle = None
        check_rc(lib().zmq_close(handle))

        logging.debug(f"{self.__get_prefix()} closed native socket {handle:#x}")

    def bind(self, endpoint: Endpoint) -> None:
        """Accept connections on an endpoint, e.g. `tcp://127.0.0.1:5555` or `inproc://name`"""
        check_rc(lib().zmq_bind(self._handle, _encode_endpoint(endpoint)))

    def connect(self, endpoint: Endpoint) -> None:
        """Connect to an endpoint"""
        check_rc(lib().zmq_connect(self._handle, _encode_endpoint(endpoint)))

    def unbind(self, endpoint: Endpoint) -> None:
        check_rc(lib().zmq_unbind(self._handle, _encode_endpoint(endpoint)))

    def disconnect(self, endpoint: Endpoint) -> None:
        check_rc(lib().zmq_disconnect(self._handle, _encode_endpoint(endpoint)))

    def send(self, data, flags: int = Flag.NONE) -> None:
        """Send one message part, set Flag.SNDMORE on every part of a multipart message except the last"""
        with Message(data) as message:
            check_rc(lib().zmq_msg_send(message, self._handle, int(flags)))

    def send_str(self, text: str, flags: int = Flag.NONE, encoding: str = "utf-8") -> None:
        self.send(text.encode(encoding), flags)

    def send_multipart(self, parts: Sequence, flags: int = Flag.NONE) -> None:
        if not parts:
            raise ValueError("cannot send a multipart message without parts")

        for part in parts[:-1]:
            self.send(part, flags | Flag.SNDMORE)

        self.send(parts[-1], flags & ~Flag.SNDMORE)

    def recv(self, flags: int = Flag.NONE) -> Message:
        """Receive one message part, the caller owns the returned message"""
        message = Message()
        try:
            check_rc(lib().zmq_msg_recv(message, self._handle, int(flags)))
        except (ZMQBindError, ZMQBindInvariantError):
            message.close()
            raise

        return message

    def recv_bytes(self, flags: int = Flag.NONE) -> bytes:
        with self.recv(flags) as message:
            return message.to_bytes()

    def recv_str(self, flags: int = Flag.NONE, encoding: str = "utf-8") -> str:
        with self.recv(flags) as message:
            return message.to_str(encoding)

    def recv_multipart(self, flags: int = Flag.NONE) -> List[bytes]:
        parts = [self.recv_bytes(flags)]
        while self.get_rcvmore():
            parts.append(self.recv_bytes(flags))

        return parts

    def getsockopt(self, option: SocketOption):
        return options.get_option(self._handle, option)

    def setsockopt(self, option: SocketOption, value) -> None:
        options.set_option(self._handle, option, value)

    def get_socket_type(self) -> SocketType:
        value = options.get_int(self._handle, SocketOption.TYPE)
        try:
            return SocketType(value)
        except ValueError:
            raise UnknownSocketTypeError(value) from None

    def get_rcvmore(self) -> bool:
        return bool(options.get_int(self._handle, SocketOption.RCVMORE))

    def get_fd(self) -> int:
        if sys.platform == "win32":
            return options.get_uint64(self._handle, SocketOption.FD)

        return options.get_int(self._handle, SocketOption.FD)

    def get_events(self) -> PollEvent:
        return PollEvent(options.get_uint32(self._handle, SocketOption.EVENTS))

    def get_last_endpoint(self) -> str:
        return options.get_bytes(self._handle, SocketOption.LAST_ENDPOINT).rstrip(b"\0").decode()

    def get_maxmsgsize(self) -> int:
        return options.get_int64(self._handle, SocketOption.MAXMSGSIZE)

    def set_maxmsgsize(self, value: int) -> None:
        options.set_int64(self._handle, SocketOption.MAXMSGSIZE, value)

    def get_affinity(self) -> int:
        return options.get_uint64(self._handle, SocketOption.AFFINITY)

    def set_affinity(self, value: int) -> None:
        options.set_uint64(self._handle, SocketOption.AFFINITY, value)

    def get_identity(self) -> bytes:
        return options.get_bytes(self._handle, SocketOption.IDENTITY)

    def set_identity(self, value: bytes) -> None:
        options.set_bytes(self._handle, SocketOption.IDENTITY, value)

    def set_subscribe(self, value: bytes) -> None:
        options.set_bytes(self._handle, SocketOption.SUBSCRIBE, value)

    def set_unsubscribe(self, value: bytes) -> None:
        options.set_bytes(self._handle, SocketOption.UNSUBSCRIBE, value)

    def get_sndhwm(self) -> int:
        return options.get_int(self._handle, SocketOption.SNDHWM)

    def set_sndhwm(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.SNDHWM, value)

    def get_rcvhwm(self) -> int:
        return options.get_int(self._handle, SocketOption.RCVHWM)

    def set_rcvhwm(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.RCVHWM, value)

    def get_rate(self) -> int:
        return options.get_int(self._handle, SocketOption.RATE)

    def set_rate(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.RATE, value)

    def get_recovery_ivl(self) -> int:
        return options.get_int(self._handle, SocketOption.RECOVERY_IVL)

    def set_recovery_ivl(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.RECOVERY_IVL, value)

    def get_sndbuf(self) -> int:
        return options.get_int(self._handle, SocketOption.SNDBUF)

    def set_sndbuf(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.SNDBUF, value)

    def get_rcvbuf(self) -> int:
        return options.get_int(self._handle, SocketOption.RCVBUF)

    def set_rcvbuf(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.RCVBUF, value)

    def get_linger(self) -> int:
        return options.get_int(self._handle, SocketOption.LINGER)

    def set_linger(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.LINGER, value)

    def get_reconnect_ivl(self) -> int:
        return options.get_int(self._handle, SocketOption.RECONNECT_IVL)

    def set_reconnect_ivl(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.RECONNECT_IVL, value)

    def get_reconnect_ivl_max(self) -> int:
        return options.get_int(self._handle, SocketOption.RECONNECT_IVL_MAX)

    def set_reconnect_ivl_max(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.RECONNECT_IVL_MAX, value)

    def get_backlog(self) -> int:
        return options.get_int(self._handle, SocketOption.BACKLOG)

    def set_backlog(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.BACKLOG, value)

    def get_multicast_hops(self) -> int:
        return options.get_int(self._handle, SocketOption.MULTICAST_HOPS)

    def set_multicast_hops(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.MULTICAST_HOPS, value)

    def get_rcvtimeo(self) -> int:
        return options.get_int(self._handle, SocketOption.RCVTIMEO)

    def set_rcvtimeo(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.RCVTIMEO, value)

    def get_sndtimeo(self) -> int:
        return options.get_int(self._handle, SocketOption.SNDTIMEO)

    def set_sndtimeo(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.SNDTIMEO, value)

    def get_tcp_keepalive(self) -> int:
        return options.get_int(self._handle, SocketOption.TCP_KEEPALIVE)

    def set_tcp_keepalive(self, value: int) -> None:
        options.set_int(self._handle, SocketOption.TCP_KEEPALIVE, value)

    def get_immediate(self) -> bool:
        return bool(options.get_int(self._handle, SocketOption.IMMEDIATE))

    def set_immediate(self, value: bool) -> None:
        options.set_int(self._handle, SocketOption.IMMEDIATE, int(value))

    def get_ipv6(self) -> bool:
        return bool(options.get_int(self._handle, SocketOption.IPV6))

    def set_ipv6(self, value: bool) -> None:
        options.set_int(self._handle, SocketOption.IPV6, int(value))

    def set_router_mandatory(self, value: bool) -> None:
        options.set_int(self._handle, SocketOption.ROUTER_MANDATORY, int(value))

    def __get_prefix(self):
        return f"{self.__class__.__name__}[{self._socket_type.name}]:"


def _encode_endpoint(endpoint: Endpoint) -> bytes:
    if isinstance(endpoint, ZMQConfig):
        endpoint = endpoint.to_address()

    return endpoint.encode()
