import logging

from zmqbind.config.section.ping_pong import PingPongConfig
from zmqbind.io.library import configure, library_path, version
from zmqbind.tools.ping_pong import PingPong
from zmqbind.utility.logging.utility import setup_logger


def main():
    config = PingPongConfig.parse("zmqbind_ping_pong", "ping_pong")

    setup_logger(config.logging_config.paths, config.logging_config.config_file, config.logging_config.level)
    configure(config.binding_config)

    logging.info(f"using libzmq {'.'.join(map(str, version()))} from {library_path()}")

    result = PingPong(config).run()
    if result is not None:
        logging.info(result.to_string())


if __name__ == "__main__":
    main()
