__all__ = ["ZMQ_HAUSNUMERO", "ErrorCode", "ZMQBindError", "ZMQBindInvariantError", "UnknownErrorCodeError",
           "UnknownSocketTypeError", "translate_errno", "check_rc", "check_ptr"]

import enum
import errno

from zmqbind.io.library import lib

# libzmq numbers the error codes it defines itself above this base
ZMQ_HAUSNUMERO = 156384712


def _errno_or_hausnumero(name: str, offset: int) -> int:
    # libzmq uses the platform value when the platform defines the code, and ZMQ_HAUSNUMERO + offset otherwise
    return getattr(errno, name, ZMQ_HAUSNUMERO + offset)


class ErrorCode(enum.IntEnum):
    """Every reason the native layer can report for a failed call"""

    # plain platform codes
    EINVAL = errno.EINVAL
    EAGAIN = errno.EAGAIN
    EINTR = errno.EINTR
    EFAULT = errno.EFAULT
    ENOMEM = errno.ENOMEM
    ENODEV = errno.ENODEV
    EMFILE = errno.EMFILE
    ENOENT = errno.ENOENT
    EACCES = errno.EACCES
    EPERM = errno.EPERM
    ENAMETOOLONG = errno.ENAMETOOLONG

    # platform codes libzmq substitutes where they are missing
    ENOTSUP = _errno_or_hausnumero("ENOTSUP", 1)
    EPROTONOSUPPORT = _errno_or_hausnumero("EPROTONOSUPPORT", 2)
    ENOBUFS = _errno_or_hausnumero("ENOBUFS", 3)
    ENETDOWN = _errno_or_hausnumero("ENETDOWN", 4)
    EADDRINUSE = _errno_or_hausnumero("EADDRINUSE", 5)
    EADDRNOTAVAIL = _errno_or_hausnumero("EADDRNOTAVAIL", 6)
    ECONNREFUSED = _errno_or_hausnumero("ECONNREFUSED", 7)
    EINPROGRESS = _errno_or_hausnumero("EINPROGRESS", 8)
    ENOTSOCK = _errno_or_hausnumero("ENOTSOCK", 9)
    EMSGSIZE = _errno_or_hausnumero("EMSGSIZE", 10)
    EAFNOSUPPORT = _errno_or_hausnumero("EAFNOSUPPORT", 11)
    ENETUNREACH = _errno_or_hausnumero("ENETUNREACH", 12)
    ECONNABORTED = _errno_or_hausnumero("ECONNABORTED", 13)
    ECONNRESET = _errno_or_hausnumero("ECONNRESET", 14)
    ENOTCONN = _errno_or_hausnumero("ENOTCONN", 15)
    ETIMEDOUT = _errno_or_hausnumero("ETIMEDOUT", 16)
    EHOSTUNREACH = _errno_or_hausnumero("EHOSTUNREACH", 17)
    ENETRESET = _errno_or_hausnumero("ENETRESET", 18)

    # codes only libzmq defines
    EFSM = ZMQ_HAUSNUMERO + 51
    ENOCOMPATPROTO = ZMQ_HAUSNUMERO + 52
    ETERM = ZMQ_HAUSNUMERO + 53
    EMTHREAD = ZMQ_HAUSNUMERO + 54

    def describe(self) -> str:
        """Human readable explanation of this code, as formatted by the native library"""
        message = lib().zmq_strerror(int(self))
        if not message:
            return self.name

        return message.decode("utf-8", errors="replace")

    @staticmethod
    def from_native(value: int) -> "ErrorCode":
        try:
            return ErrorCode(value)
        except ValueError:
            raise UnknownErrorCodeError(value) from None


class ZMQBindError(Exception):
    """A native call failed, `code` says why"""

    code: ErrorCode
    message: str

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(code, message)
        self.code = code
        self.message = message

    @property
    def errno(self) -> ErrorCode:
        return self.code

    def __str__(self) -> str:
        return f"{self.code.name}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.code.name}, {self.message!r})"


class ZMQBindInvariantError(RuntimeError):
    """The native layer answered with something this binding does not know, e.g. a different libzmq ABI

    Not a ZMQBindError: handlers for transport failures never catch it.
    """


class UnknownErrorCodeError(ZMQBindInvariantError):
    def __init__(self, value: int) -> None:
        super().__init__(f"libzmq reported unknown error code {value}")
        self.value = value


class UnknownSocketTypeError(ZMQBindInvariantError):
    def __init__(self, value: int) -> None:
        super().__init__(f"libzmq reported socket type {value}, which is out of range")
        self.value = value


def translate_errno() -> ZMQBindError:
    """Read the calling thread's native error code and return the matching exception, ready to be raised"""
    code = ErrorCode.from_native(lib().zmq_errno())
    return ZMQBindError(code, code.describe())


def check_rc(rc: int) -> int:
    if rc < 0:
        raise translate_errno()

    return rc


def check_ptr(pointer):
    if not pointer:
        raise translate_errno()

    return pointer
