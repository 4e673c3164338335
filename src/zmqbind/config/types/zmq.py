import dataclasses
import enum
from typing import Optional


class ZMQType(enum.Enum):
    inproc = "inproc"
    ipc = "ipc"
    tcp = "tcp"

    @staticmethod
    def allowed_types():
        return {t.value for t in ZMQType}


@dataclasses.dataclass
class ZMQConfig:
    type: ZMQType
    host: str
    port: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.type, ZMQType):
            raise TypeError(f"Invalid zmq type {self.type}, available types are: {ZMQType.allowed_types()}")

        if not isinstance(self.host, str) or not self.host:
            raise TypeError(f"Host should be a non-empty string, given {self.host!r}")

        if self.type == ZMQType.tcp:
            if self.port is None:
                raise ValueError(f"type {self.type.value} should have `port`")

            # port 0 means the native layer picks an ephemeral port, it is rendered as the `*` wildcard
            if not isinstance(self.port, int) or not (0 <= self.port <= 65535):
                raise ValueError(f"Port should be an integer between 0 and 65535, given {self.port!r}")

        elif self.port is not None:
            raise ValueError(f"type {self.type.value} should not have `port`")

    def to_address(self) -> str:
        if self.type == ZMQType.tcp:
            port = "*" if self.port == 0 else str(self.port)
            return f"tcp://{self.host}:{port}"

        return f"{self.type.value}://{self.host}"

    @staticmethod
    def from_string(address: str) -> "ZMQConfig":
        if "://" not in address:
            raise ValueError(f"Invalid address format: {address!r}, expected format is `type://address`")

        socket_type, host_port = address.split("://", 1)
        if socket_type not in ZMQType.allowed_types():
            raise ValueError(f"supported ZMQ types are: {ZMQType.allowed_types()}, given {socket_type!r}")

        zmq_type = ZMQType(socket_type)
        if zmq_type in {ZMQType.inproc, ZMQType.ipc}:
            return ZMQConfig(zmq_type, host=host_port)

        try:
            host, port = host_port.rsplit(":", 1)
        except ValueError as exc:
            raise ValueError(f"Invalid address format: {address!r}, expected format is `tcp://host:port`") from exc

        return ZMQConfig(zmq_type, host=host, port=0 if port == "*" else int(port))

    def __str__(self) -> str:
        return self.to_address()
