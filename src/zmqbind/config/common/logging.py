import dataclasses
from typing import Optional, Tuple

from zmqbind.config import defaults
from zmqbind.config.config_class import ConfigClass
from zmqbind.utility.logging.utility import LoggingLevel


@dataclasses.dataclass
class LoggingConfig(ConfigClass):
    paths: Tuple[str, ...] = dataclasses.field(
        default=defaults.DEFAULT_LOGGING_PATHS,
        metadata=dict(
            long="--logging-paths",
            short="-lp",
            help="specify where logs should be logged to, it can accept multiple files, default is /dev/stdout",
        ),
    )
    config_file: Optional[str] = dataclasses.field(
        default=None,
        metadata=dict(
            long="--logging-config-file",
            short="-lc",
            help="use standard python .conf file to specify python logging file configuration format",
        ),
    )
    level: str = dataclasses.field(
        default=defaults.DEFAULT_LOGGING_LEVEL,
        metadata=dict(
            long="--logging-level",
            short="-ll",
            choices=tuple(level.name for level in LoggingLevel),
            help="specify the logging level",
        ),
    )

    def __post_init__(self) -> None:
        if not self.paths and self.config_file is None:
            raise ValueError("logging paths cannot be empty unless a logging config file is given.")

        if self.level not in LoggingLevel.__members__:
            raise ValueError(f"logging level must be one of {tuple(LoggingLevel.__members__)}, given {self.level!r}")
