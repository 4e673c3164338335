# ==============================================================
# ----------------- Native library configuration -----------------

# number of native io threads per context
DEFAULT_IO_THREADS = 1

# environment variables read by BindingConfig.from_environment()
ENV_LIBRARY_PATH = "ZMQBIND_LIBZMQ"
ENV_IO_THREADS = "ZMQBIND_IO_THREADS"
ENV_RELEASE_FAILURE_POLICY = "ZMQBIND_RELEASE_FAILURE_POLICY"

# what to do when a socket or message fails to release during garbage collection, "abort" or "log"
DEFAULT_RELEASE_FAILURE_POLICY = "abort"

# ==============================================================
# --------------------------- Logging ---------------------------

DEFAULT_LOGGING_PATHS = ("/dev/stdout",)
DEFAULT_LOGGING_LEVEL = "INFO"

# ==============================================================
# ------------------------- Ping pong ---------------------------

DEFAULT_PING_PONG_ROUNDS = 10_000
DEFAULT_PING_PONG_MESSAGE_SIZE = 64
DEFAULT_PING_PONG_ADDRESS = "inproc://zmqbind_ping_pong"

# milliseconds, applied to both directions so a missing peer does not hang the tool
DEFAULT_PING_PONG_TIMEOUT_MS = 10_000
