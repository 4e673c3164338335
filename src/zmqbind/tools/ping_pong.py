import dataclasses
import logging
import threading
import time
from typing import List, Optional

from zmqbind.config.section.ping_pong import PingPongConfig, PingPongRole
from zmqbind.io.constants import SocketType
from zmqbind.io.context import Context
from zmqbind.io.error import ZMQBindError
from zmqbind.io.socket import Socket
from zmqbind.utility.formatter import format_bytes, format_integer, format_microseconds


@dataclasses.dataclass
class PingPongResult:
    rounds: int
    message_size: int
    total_seconds: float
    latencies_us: List[float]

    @property
    def average_latency_us(self) -> float:
        return sum(self.latencies_us) / len(self.latencies_us)

    @property
    def max_latency_us(self) -> float:
        return max(self.latencies_us)

    def percentile_latency_us(self, percentile: float) -> float:
        ordered = sorted(self.latencies_us)
        index = min(len(ordered) - 1, int(len(ordered) * percentile / 100))
        return ordered[index]

    def to_string(self) -> str:
        return (
            f"{format_integer(self.rounds)} round trips of {format_bytes(self.message_size)} in "
            f"{self.total_seconds:.3f}s: average={format_microseconds(self.average_latency_us)}, "
            f"p99={format_microseconds(self.percentile_latency_us(99))}, "
            f"max={format_microseconds(self.max_latency_us)}"
        )


class PingPong:
    """Measures round trip latency of PAIR sockets, the echo side sends back every message it receives"""

    def __init__(self, config: PingPongConfig):
        self._config = config
        self._echo_error: Optional[BaseException] = None

    def run(self) -> Optional[PingPongResult]:
        context = Context(self._config.binding_config.io_threads)
        try:
            if self._config.role == PingPongRole.local:
                return self.__run_local(context)

            if self._config.role == PingPongRole.echo:
                with self.__create_socket(context) as socket:
                    socket.bind(self._config.address)
                    self.__echo(socket)
                return None

            with self.__create_socket(context) as socket:
                socket.connect(self._config.address)
                return self.__ping(socket)
        finally:
            context.term()

    def __run_local(self, context: Context) -> PingPongResult:
        with self.__create_socket(context) as echo_socket, self.__create_socket(context) as ping_socket:
            echo_socket.bind(self._config.address)
            if self._config.address.port == 0:
                ping_socket.connect(echo_socket.get_last_endpoint())
            else:
                ping_socket.connect(self._config.address)

            echo_thread = threading.Thread(target=self.__echo_guarded, args=(echo_socket,), daemon=True)
            echo_thread.start()
            try:
                result = self.__ping(ping_socket)
            finally:
                echo_thread.join()

        if self._echo_error is not None:
            raise self._echo_error

        return result

    def __create_socket(self, context: Context) -> Socket:
        socket = context.socket(SocketType.PAIR)
        socket.set_linger(0)
        socket.set_rcvtimeo(self._config.timeout_ms)
        socket.set_sndtimeo(self._config.timeout_ms)
        return socket

    def __echo_guarded(self, socket: Socket):
        try:
            self.__echo(socket)
        except ZMQBindError as e:
            self._echo_error = e

    def __echo(self, socket: Socket):
        logging.info(f"{self.__get_prefix()} echoing {self._config.rounds} messages on {self._config.address}")

        for _ in range(self._config.rounds):
            with socket.recv() as message:
                message.with_bytes(socket.send)

    def __ping(self, socket: Socket) -> PingPongResult:
        logging.info(
            f"{self.__get_prefix()} sending {self._config.rounds} messages of {self._config.message_size} bytes to "
            f"{self._config.address}"
        )

        payload = b"\x2a" * self._config.message_size
        latencies_us: List[float] = []

        start = time.perf_counter_ns()
        for _ in range(self._config.rounds):
            sent_at = time.perf_counter_ns()
            socket.send(payload)
            reply = socket.recv_bytes()
            latencies_us.append((time.perf_counter_ns() - sent_at) / 1000)

            if reply != payload:
                raise RuntimeError(f"{self.__get_prefix()} echo returned {len(reply)} bytes that differ from the ping")

        total_seconds = (time.perf_counter_ns() - start) / 1_000_000_000
        return PingPongResult(self._config.rounds, self._config.message_size, total_seconds, latencies_us)

    def __get_prefix(self):
        return f"{self.__class__.__name__}[{self._config.role.value}]:"
