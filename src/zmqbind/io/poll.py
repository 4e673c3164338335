from typing import Optional, Sequence

from zmqbind.io.constants import PollEvent
from zmqbind.io.error import ErrorCode, ZMQBindError, check_rc
from zmqbind.io.library import lib, zmq_pollitem_t
from zmqbind.io.socket import Socket


class PollItem:
    """What to watch for in one poll() call: a socket or a raw file descriptor, and the events of interest

    `revents` holds the events observed by the last poll() call this item took part in.
    """

    def __init__(self, socket: Optional[Socket] = None, fd: int = -1, events: int = PollEvent.POLLIN) -> None:
        if (socket is None) == (fd < 0):
            raise ValueError("a poll item watches either a socket or a file descriptor")

        self.socket = socket
        self.fd = fd
        self.events = PollEvent(events)
        self.revents = PollEvent.NONE

    def __repr__(self) -> str:
        target = repr(self.socket) if self.socket is not None else f"fd={self.fd}"
        return f"{self.__class__.__name__}({target}, events={self.events!r}, revents={self.revents!r})"


def poll(items: Sequence[PollItem], timeout: int = -1) -> int:
    """Wait until at least one item is ready or `timeout` milliseconds pass, a negative timeout waits forever

    Updates every item's `revents` and returns the number of ready items. Nothing is retried.
    """

    native_items = (zmq_pollitem_t * len(items))()
    for native, item in zip(native_items, items):
        # a NULL socket makes the native layer poll `fd` instead, so a closed socket is rejected here
        if item.socket is not None and item.socket.closed:
            raise ZMQBindError(ErrorCode.ENOTSOCK, ErrorCode.ENOTSOCK.describe())

        native.socket = item.socket.handle if item.socket is not None else None
        native.fd = item.fd
        native.events = int(item.events)
        native.revents = 0

    ready = check_rc(lib().zmq_poll(native_items, len(items), timeout))

    for native, item in zip(native_items, items):
        item.revents = PollEvent(native.revents)

    return ready
