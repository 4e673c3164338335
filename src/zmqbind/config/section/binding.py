import dataclasses
import enum
import os
from typing import Mapping, Optional

from zmqbind.config import defaults
from zmqbind.config.config_class import ConfigClass


class ReleaseFailurePolicy(enum.Enum):
    # log a critical record, then abort the process
    abort = "abort"

    # log a critical record and leak the native handle
    log = "log"

    def __str__(self) -> str:
        return self.value


def _library_path_from_environment(environ: Mapping[str, str]) -> Optional[str]:
    return environ.get(defaults.ENV_LIBRARY_PATH) or None


def _io_threads_from_environment(environ: Mapping[str, str]) -> int:
    return int(environ.get(defaults.ENV_IO_THREADS, defaults.DEFAULT_IO_THREADS))


def _release_failure_policy_from_environment(environ: Mapping[str, str]) -> ReleaseFailurePolicy:
    return ReleaseFailurePolicy(
        environ.get(defaults.ENV_RELEASE_FAILURE_POLICY, defaults.DEFAULT_RELEASE_FAILURE_POLICY)
    )


@dataclasses.dataclass
class BindingConfig(ConfigClass):
    """Process-wide settings of the native binding, defaults are taken from the ZMQBIND_* environment variables"""

    library_path: Optional[str] = dataclasses.field(
        default_factory=lambda: _library_path_from_environment(os.environ),
        metadata=dict(short="-lib", help="path to the libzmq shared library, searched for when omitted"),
    )
    io_threads: int = dataclasses.field(
        default_factory=lambda: _io_threads_from_environment(os.environ),
        metadata=dict(short="-it", help="number of native io threads for each context"),
    )
    release_failure_policy: ReleaseFailurePolicy = dataclasses.field(
        default_factory=lambda: _release_failure_policy_from_environment(os.environ),
        metadata=dict(
            short="-rfp",
            choices=tuple(ReleaseFailurePolicy),
            help="what to do when a socket or message fails to release during garbage collection",
        ),
    )

    def __post_init__(self) -> None:
        if isinstance(self.release_failure_policy, str):
            self.release_failure_policy = ReleaseFailurePolicy(self.release_failure_policy)

        if self.io_threads < 0:
            raise ValueError("io_threads must be a non-negative integer.")

        if self.library_path is not None and not self.library_path:
            raise ValueError("library_path cannot be an empty string.")

    @staticmethod
    def from_environment(environ: Mapping[str, str]) -> "BindingConfig":
        return BindingConfig(
            library_path=_library_path_from_environment(environ),
            io_threads=_io_threads_from_environment(environ),
            release_failure_policy=_release_failure_policy_from_environment(environ),
        )
