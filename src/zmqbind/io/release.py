import logging
import os

from zmqbind.config.section.binding import ReleaseFailurePolicy
from zmqbind.io.library import get_config


def release_failed(resource: str, error: BaseException) -> None:
    """Called when a socket or message could not be released during garbage collection

    There is no caller to hand the error to, so depending on BindingConfig.release_failure_policy the process is
    either aborted or the native handle is leaked. Explicit close() calls never come through here.
    """

    policy = get_config().release_failure_policy
    logging.critical(f"{resource}: implicit release failed, policy is {policy.value}: {error}")

    if policy == ReleaseFailurePolicy.abort:
        logging.shutdown()
        os.abort()
