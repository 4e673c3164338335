import ctypes
from typing import Callable, TypeVar

from zmqbind.io.error import ZMQBindError, ZMQBindInvariantError, check_rc
from zmqbind.io.library import as_native_buffer, lib, zmq_msg_t
from zmqbind.io.release import release_failed

T = TypeVar("T")


class Message:
    """Owns one native message descriptor

    Message() is empty and ready to receive into, Message(data) copies `data` (any buffer) into storage owned by the
    native layer. The descriptor is closed exactly once: by close(), by leaving a `with` block, or when the object
    is garbage collected.
    """

    def __init__(self, data=None) -> None:
        self._closed = True
        self._msg = zmq_msg_t()

        if data is None:
            check_rc(lib().zmq_msg_init(ctypes.byref(self._msg)))
            self._closed = False
            return

        buffer, size = as_native_buffer(data)
        check_rc(lib().zmq_msg_init_size(ctypes.byref(self._msg), size))
        self._closed = False

        if size:
            ctypes.memmove(lib().zmq_msg_data(ctypes.byref(self._msg)), buffer, size)

    @property
    def _as_parameter_(self):
        self.__check_open()
        return ctypes.byref(self._msg)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def size(self) -> int:
        self.__check_open()
        return lib().zmq_msg_size(ctypes.byref(self._msg))

    def __len__(self) -> int:
        return self.size

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __repr__(self) -> str:
        if self._closed:
            return f"{self.__class__.__name__}(closed)"

        return f"{self.__class__.__name__}(size={self.size})"

    def __enter__(self) -> "Message":
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

    def with_bytes(self, func: Callable[[memoryview], T]) -> T:
        """Call `func` with a zero-copy view of the payload, the view is released when `func` returns"""

        # pointer and size come from the descriptor on every call, the native layer may move the payload
        size = self.size
        if size == 0:
            return func(memoryview(b""))

        array = (ctypes.c_ubyte * size).from_address(lib().zmq_msg_data(ctypes.byref(self._msg)))
        with memoryview(array) as raw, raw.cast("B") as view:
            return func(view)

    def with_str(self, func: Callable[[str], T], encoding: str = "utf-8") -> T:
        return self.with_bytes(lambda view: func(str(view, encoding)))

    def to_bytes(self) -> bytes:
        return self.with_bytes(bytes)

    def to_str(self, encoding: str = "utf-8") -> str:
        return self.with_str(str, encoding)

    def close(self) -> None:
        if self._closed:
            return

        # closing a descriptor twice is undefined in the native layer, so never retry
        self._closed = True
        check_rc(lib().zmq_msg_close(ctypes.byref(self._msg)))

    def __check_open(self):
        if self._closed:
            raise ValueError("operation on a closed message")


def init_empty() -> Message:
    return Message()


def init_with(data) -> Message:
    return Message(data)
