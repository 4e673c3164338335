import dataclasses
import enum

from zmqbind.config import defaults
from zmqbind.config.common.logging import LoggingConfig
from zmqbind.config.config_class import ConfigClass
from zmqbind.config.section.binding import BindingConfig
from zmqbind.config.types.zmq import ZMQConfig, ZMQType


class PingPongRole(enum.Enum):
    # run both peers in this process, sharing one context
    local = "local"

    # bind and echo every message back, the counterpart of `ping`
    echo = "echo"

    # connect, send messages and measure round trips
    ping = "ping"

    def __str__(self) -> str:
        return self.value


@dataclasses.dataclass
class PingPongConfig(ConfigClass):
    address: ZMQConfig = dataclasses.field(
        default_factory=lambda: ZMQConfig.from_string(defaults.DEFAULT_PING_PONG_ADDRESS),
        metadata=dict(positional=True, help="endpoint to bind or connect, e.g. tcp://127.0.0.1:5555"),
    )
    role: PingPongRole = dataclasses.field(
        default=PingPongRole.local,
        metadata=dict(short="-r", choices=tuple(PingPongRole), help="which side of the ping pong to run"),
    )
    rounds: int = dataclasses.field(
        default=defaults.DEFAULT_PING_PONG_ROUNDS, metadata=dict(short="-n", help="number of round trips")
    )
    message_size: int = dataclasses.field(
        default=defaults.DEFAULT_PING_PONG_MESSAGE_SIZE, metadata=dict(short="-s", help="message size in bytes")
    )
    timeout_ms: int = dataclasses.field(
        default=defaults.DEFAULT_PING_PONG_TIMEOUT_MS,
        metadata=dict(short="-t", help="send and receive timeout in milliseconds, -1 means wait forever"),
    )
    binding_config: BindingConfig = dataclasses.field(default_factory=BindingConfig)
    logging_config: LoggingConfig = dataclasses.field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        if self.rounds <= 0:
            raise ValueError("rounds must be a positive integer.")
        if self.message_size < 0:
            raise ValueError("message_size must be a non-negative integer.")
        if self.timeout_ms < -1:
            raise ValueError("timeout_ms must be -1 or a non-negative integer.")
        if self.address.type == ZMQType.inproc and self.role != PingPongRole.local:
            raise ValueError("inproc addresses only work with the local role, peers must share a context.")
