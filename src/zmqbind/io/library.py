# This file loads the native libzmq shared library and declares the primitives the binding calls through ctypes.
# Nothing outside zmqbind.io should touch the returned library object directly.

__all__ = ["lib", "version", "configure", "get_config", "library_path", "LibraryNotFoundError", "zmq_msg_t",
           "zmq_pollitem_t", "as_native_buffer"]

import ctypes
import ctypes.util
import glob
import importlib.util
import logging
import os
import sys
import threading
from ctypes import POINTER, c_char_p, c_int, c_long, c_short, c_size_t, c_void_p
from typing import List, Optional, Tuple

from zmqbind.config.section.binding import BindingConfig


class LibraryNotFoundError(OSError):
    """The libzmq shared library could not be located or loaded"""


class zmq_msg_t(ctypes.Structure):
    # libzmq reserves 64 bytes per message, aligned at least like a pointer
    _fields_ = [("_", ctypes.c_uint64 * 8)]


if sys.platform == "win32":
    _native_fd_t = c_size_t  # SOCKET
else:
    _native_fd_t = c_int


class zmq_pollitem_t(ctypes.Structure):
    _fields_ = [
        ("socket", c_void_p),
        ("fd", _native_fd_t),
        ("events", c_short),
        ("revents", c_short),
    ]


_DECLARATIONS = [
    # Version and errors.
    ("zmq_version", [POINTER(c_int), POINTER(c_int), POINTER(c_int)], None),
    ("zmq_errno", [], c_int),
    ("zmq_strerror", [c_int], c_char_p),
    # Context.
    ("zmq_ctx_new", [], c_void_p),
    ("zmq_ctx_set", [c_void_p, c_int, c_int], c_int),
    ("zmq_ctx_get", [c_void_p, c_int], c_int),
    ("zmq_ctx_term", [c_void_p], c_int),
    # Socket.
    ("zmq_socket", [c_void_p, c_int], c_void_p),
    ("zmq_close", [c_void_p], c_int),
    ("zmq_getsockopt", [c_void_p, c_int, c_void_p, POINTER(c_size_t)], c_int),
    ("zmq_setsockopt", [c_void_p, c_int, c_void_p, c_size_t], c_int),
    ("zmq_bind", [c_void_p, c_char_p], c_int),
    ("zmq_connect", [c_void_p, c_char_p], c_int),
    ("zmq_unbind", [c_void_p, c_char_p], c_int),
    ("zmq_disconnect", [c_void_p, c_char_p], c_int),
    # Message.
    ("zmq_msg_init", [POINTER(zmq_msg_t)], c_int),
    ("zmq_msg_init_size", [POINTER(zmq_msg_t), c_size_t], c_int),
    ("zmq_msg_data", [POINTER(zmq_msg_t)], c_void_p),
    ("zmq_msg_size", [POINTER(zmq_msg_t)], c_size_t),
    ("zmq_msg_close", [POINTER(zmq_msg_t)], c_int),
    ("zmq_msg_send", [POINTER(zmq_msg_t), c_void_p, c_int], c_int),
    ("zmq_msg_recv", [POINTER(zmq_msg_t), c_void_p, c_int], c_int),
    # Multiplexing.
    ("zmq_poll", [POINTER(zmq_pollitem_t), c_int, c_long], c_int),
]

_lock = threading.Lock()
_library: Optional[ctypes.CDLL] = None
_library_path: Optional[str] = None
_config: Optional[BindingConfig] = None


def configure(config: BindingConfig) -> None:
    """Install process-wide binding settings, must happen before the library is first used"""

    global _config

    with _lock:
        if _library is not None and config.library_path not in {None, _library_path}:
            raise RuntimeError(f"libzmq is already loaded from {_library_path}, cannot switch to {config.library_path}")

        _config = config


def get_config() -> BindingConfig:
    global _config

    with _lock:
        if _config is None:
            _config = BindingConfig()

        return _config


def lib() -> ctypes.CDLL:
    global _library, _library_path

    if _library is not None:
        return _library

    config = get_config()

    with _lock:
        if _library is not None:
            return _library

        path, library = _load(config.library_path)
        _declare(library)

        _library_path = path
        _library = library

    logging.debug(f"libzmq {'.'.join(map(str, version()))} loaded from {path}")
    return _library


def library_path() -> Optional[str]:
    """Path of the loaded libzmq, None before the first native call"""
    return _library_path


def version() -> Tuple[int, int, int]:
    """Return the (major, minor, patch) version of the loaded libzmq"""
    major = c_int()
    minor = c_int()
    patch = c_int()
    lib().zmq_version(ctypes.byref(major), ctypes.byref(minor), ctypes.byref(patch))
    return major.value, minor.value, patch.value


def as_native_buffer(data) -> Tuple[object, int]:
    """Return (buffer, size) where buffer can be passed as a `void *` without copying bytes objects"""

    if isinstance(data, bytes):
        return data, len(data)

    view = memoryview(data)
    if view.readonly or not view.c_contiguous:
        raw = view.tobytes()
        return raw, len(raw)

    view = view.cast("B")
    return (ctypes.c_char * view.nbytes).from_buffer(view), view.nbytes


def _load(explicit_path: Optional[str]) -> Tuple[str, ctypes.CDLL]:
    candidates = [explicit_path] if explicit_path is not None else _candidate_paths()

    errors: List[str] = []
    for candidate in candidates:
        try:
            # ctypes saves errno around every call, zmq_errno() sees the failing call's value even if Python code ran
            # in between
            return candidate, ctypes.CDLL(candidate, use_errno=True)
        except OSError as e:
            errors.append(f"{candidate}: {e}")

    raise LibraryNotFoundError(
        f"cannot load libzmq, tried {candidates or 'nothing'}; install pyzmq or libzmq, or point "
        f"{BindingConfig.__name__}.library_path at the shared library ({'; '.join(errors)})"
    )


def _candidate_paths() -> List[str]:
    candidates: List[str] = []

    system = ctypes.util.find_library("zmq") or ctypes.util.find_library("libzmq")
    if system is not None:
        candidates.append(system)

    candidates.extend(_pyzmq_bundled_paths())
    return candidates


def _pyzmq_bundled_paths() -> List[str]:
    # pyzmq wheels ship their own libzmq, auditwheel and delvewheel put it next to the package in pyzmq.libs,
    # delocate puts it inside the package in .dylibs
    spec = importlib.util.find_spec("zmq")
    if spec is None or spec.origin is None:
        return []

    package_directory = os.path.dirname(spec.origin)
    site_directory = os.path.dirname(package_directory)

    patterns = [
        os.path.join(site_directory, "pyzmq.libs", "libzmq*"),
        os.path.join(package_directory, ".libs", "libzmq*"),
        os.path.join(package_directory, ".dylibs", "libzmq*"),
        os.path.join(package_directory, "libzmq*"),
    ]

    paths: List[str] = []
    for pattern in patterns:
        for path in sorted(glob.glob(pattern)):
            if path.endswith((".so", ".dylib", ".dll")) or ".so." in path:
                paths.append(path)

    return paths


def _declare(library: ctypes.CDLL) -> None:
    for name, argtypes, restype in _DECLARATIONS:
        try:
            function = getattr(library, name)
        except AttributeError as e:
            raise LibraryNotFoundError(f"{library._name} does not export {name}, libzmq >= 4.0 is required") from e

        function.argtypes = argtypes
        function.restype = restype
