import unittest

from zmqbind.config.types.zmq import ZMQConfig, ZMQType
from zmqbind.utility.logging.utility import setup_logger
from tests.utility.utility import logging_test_name


class TestZMQConfig(unittest.TestCase):
    def setUp(self) -> None:
        setup_logger()
        logging_test_name(self)

    def test_tcp(self):
        config = ZMQConfig.from_string("tcp://127.0.0.1:2345")
        self.assertEqual(config.type, ZMQType.tcp)
        self.assertEqual(config.host, "127.0.0.1")
        self.assertEqual(config.port, 2345)
        self.assertEqual(str(config), "tcp://127.0.0.1:2345")

    def test_wildcard_port(self):
        config = ZMQConfig.from_string("tcp://127.0.0.1:*")
        self.assertEqual(config.port, 0)
        self.assertEqual(config.to_address(), "tcp://127.0.0.1:*")

    def test_inproc_and_ipc(self):
        self.assertEqual(ZMQConfig.from_string("inproc://workers").to_address(), "inproc://workers")
        self.assertEqual(ZMQConfig.from_string("ipc:///tmp/zmqbind.ipc").host, "/tmp/zmqbind.ipc")

    def test_invalid(self):
        for address in ("127.0.0.1:2345", "udp://127.0.0.1:2345", "tcp://127.0.0.1", "tcp://127.0.0.1:70000"):
            with self.assertRaises(ValueError):
                ZMQConfig.from_string(address)

        with self.assertRaises(ValueError):
            ZMQConfig(ZMQType.inproc, host="workers", port=1)

        with self.assertRaises(TypeError):
            ZMQConfig("tcp", host="127.0.0.1", port=1)
