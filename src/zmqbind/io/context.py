import logging
from typing import Optional

from zmqbind.io.constants import ContextOption, SocketType
from zmqbind.io.error import check_ptr, translate_errno
from zmqbind.io.library import get_config, lib
from zmqbind.io.socket import Socket


class Context:
    """Owns the native engine instance that runs the io threads and every socket created from it

    A context may be shared between threads to create sockets concurrently. It is only destroyed by an explicit
    term(), never on garbage collection: the context must outlive every socket created from it, and terminating
    while sockets are still open blocks until they are closed.
    """

    def __init__(self, io_threads: Optional[int] = None) -> None:
        if io_threads is None:
            io_threads = get_config().io_threads

        self._handle = None
        self._io_threads = io_threads

        handle = check_ptr(lib().zmq_ctx_new())
        if lib().zmq_ctx_set(handle, int(ContextOption.IO_THREADS), io_threads) < 0:
            error = translate_errno()
            lib().zmq_ctx_term(handle)
            raise error

        self._handle = handle
        logging.debug(f"{self.__get_prefix()} created with io_threads={io_threads}")

    @property
    def handle(self):
        """Address of the native context, None once terminated"""
        return self._handle

    @property
    def io_threads(self) -> int:
        return self._io_threads

    @property
    def closed(self) -> bool:
        return self._handle is None

    def __repr__(self) -> str:
        state = "terminated" if self.closed else f"io_threads={self._io_threads}"
        return f"{self.__class__.__name__}({state})"

    def socket(self, socket_type: SocketType) -> Socket:
        """Create a socket of the given type bound to this context"""
        return Socket(self, socket_type)

    def term(self) -> None:
        """Terminate the native engine, every socket created from this context must be closed first"""
        if self._handle is None:
            return

        if lib().zmq_ctx_term(self._handle) < 0:
            raise translate_errno()

        self._handle = None
        logging.debug(f"{self.__get_prefix()} terminated")

    def __get_prefix(self):
        return f"{self.__class__.__name__}:"


def init(io_threads: Optional[int] = None) -> Context:
    return Context(io_threads)
