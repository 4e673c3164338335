# Typed access to socket options over the native getsockopt/setsockopt buffer protocol. Options only differ in the
# width of their value, so there is one getter and one setter per width, and Socket's accessors just pick the tag.

import ctypes
from typing import Any, Callable, Dict

from zmqbind.io.constants import MAX_BYTES_OPTION_SIZE, OptionEncoding, SocketOption
from zmqbind.io.error import check_rc
from zmqbind.io.library import as_native_buffer, lib


def _get_scalar(handle, option: SocketOption, value_type):
    value = value_type(0)
    size = ctypes.c_size_t(ctypes.sizeof(value))
    check_rc(lib().zmq_getsockopt(handle, int(option), ctypes.byref(value), ctypes.byref(size)))
    return value.value


def _set_scalar(handle, option: SocketOption, value_type, value: int) -> None:
    native = value_type(value)
    check_rc(lib().zmq_setsockopt(handle, int(option), ctypes.byref(native), ctypes.sizeof(native)))


def get_int(handle, option: SocketOption) -> int:
    return _get_scalar(handle, option, ctypes.c_int)


def get_int64(handle, option: SocketOption) -> int:
    return _get_scalar(handle, option, ctypes.c_int64)


def get_uint64(handle, option: SocketOption) -> int:
    return _get_scalar(handle, option, ctypes.c_uint64)


def get_uint32(handle, option: SocketOption) -> int:
    return _get_scalar(handle, option, ctypes.c_uint32)


def get_bytes(handle, option: SocketOption) -> bytes:
    buffer = ctypes.create_string_buffer(MAX_BYTES_OPTION_SIZE)
    size = ctypes.c_size_t(MAX_BYTES_OPTION_SIZE)
    check_rc(lib().zmq_getsockopt(handle, int(option), buffer, ctypes.byref(size)))
    return buffer.raw[: size.value]


def set_int(handle, option: SocketOption, value: int) -> None:
    _set_scalar(handle, option, ctypes.c_int, value)


def set_int64(handle, option: SocketOption, value: int) -> None:
    _set_scalar(handle, option, ctypes.c_int64, value)


def set_uint64(handle, option: SocketOption, value: int) -> None:
    _set_scalar(handle, option, ctypes.c_uint64, value)


def set_bytes(handle, option: SocketOption, value) -> None:
    buffer, size = as_native_buffer(value)
    check_rc(lib().zmq_setsockopt(handle, int(option), buffer, size))


_GETTERS: Dict[OptionEncoding, Callable[[Any, SocketOption], Any]] = {
    OptionEncoding.INT: get_int,
    OptionEncoding.INT64: get_int64,
    OptionEncoding.UINT64: get_uint64,
    OptionEncoding.BYTES: get_bytes,
}

_SETTERS: Dict[OptionEncoding, Callable[[Any, SocketOption, Any], None]] = {
    OptionEncoding.INT: set_int,
    OptionEncoding.INT64: set_int64,
    OptionEncoding.UINT64: set_uint64,
    OptionEncoding.BYTES: set_bytes,
}


def get_option(handle, option: SocketOption):
    """Read an option using the width declared for it"""
    return _GETTERS[option.encoding](handle, option)


def set_option(handle, option: SocketOption, value) -> None:
    """Write an option using the width declared for it"""
    _SETTERS[option.encoding](handle, option, value)
