import sys
import threading
import unittest
from unittest import mock

from zmqbind.config.section.binding import BindingConfig, ReleaseFailurePolicy
from zmqbind.config.types.zmq import ZMQConfig, ZMQType
from zmqbind.io.constants import Flag, SocketType
from zmqbind.io.context import Context
from zmqbind.io.error import ZMQ_HAUSNUMERO, ErrorCode, ZMQBindError
from zmqbind.io.library import lib
from zmqbind.utility.logging.utility import setup_logger
from tests.utility.utility import logging_test_name, unique_inproc_endpoint

RECEIVE_TIMEOUT_MS = 5000


class TestSocket(unittest.TestCase):
    def setUp(self) -> None:
        setup_logger()
        logging_test_name(self)

        self._context = Context(io_threads=1)
        self._sockets = []

    def tearDown(self) -> None:
        for socket in self._sockets:
            socket.close()

        self._context.term()

    def _socket(self, socket_type: SocketType):
        socket = self._context.socket(socket_type)
        socket.set_linger(0)
        socket.set_rcvtimeo(RECEIVE_TIMEOUT_MS)
        socket.set_sndtimeo(RECEIVE_TIMEOUT_MS)
        self._sockets.append(socket)
        return socket

    def _pair(self):
        endpoint = unique_inproc_endpoint(self)
        server = self._socket(SocketType.PAIR)
        server.bind(endpoint)
        client = self._socket(SocketType.PAIR)
        client.connect(endpoint)
        return server, client

    def test_send_and_receive(self):
        server, client = self._pair()

        client.send_str("hello")
        self.assertEqual(server.recv_str(), "hello")

        server.send(b"")
        self.assertEqual(client.recv_bytes(), b"")

        payload = bytes(range(256)) * 1024
        client.send(payload)
        with server.recv() as message:
            self.assertEqual(message.size, len(payload))
            self.assertEqual(message.with_bytes(bytes), payload)

    def test_multipart(self):
        server, client = self._pair()

        client.send(b"first", Flag.SNDMORE)
        client.send(b"second")

        self.assertEqual(server.recv_bytes(), b"first")
        self.assertTrue(server.get_rcvmore())
        self.assertEqual(server.recv_bytes(), b"second")
        self.assertFalse(server.get_rcvmore())

        client.send_multipart([b"a", b"", bytearray(b"c")])
        self.assertEqual(server.recv_multipart(), [b"a", b"", b"c"])

        with self.assertRaises(ValueError):
            client.send_multipart([])

    def test_endpoint_from_config(self):
        endpoint = ZMQConfig(ZMQType.inproc, host=f"{self._testMethodName}-config")
        server = self._socket(SocketType.PAIR)
        server.bind(endpoint)
        client = self._socket(SocketType.PAIR)
        client.connect(endpoint)

        client.send(b"via config")
        self.assertEqual(server.recv_bytes(), b"via config")
        self.assertEqual(server.get_last_endpoint(), endpoint.to_address())

    def test_tcp_ephemeral_port(self):
        server = self._socket(SocketType.PAIR)
        server.bind(ZMQConfig(ZMQType.tcp, host="127.0.0.1", port=0))

        endpoint = ZMQConfig.from_string(server.get_last_endpoint())
        self.assertNotEqual(endpoint.port, 0)

        client = self._socket(SocketType.PAIR)
        client.connect(endpoint)
        client.send(b"over tcp")
        self.assertEqual(server.recv_bytes(), b"over tcp")

    def test_malformed_endpoint(self):
        socket = self._socket(SocketType.PAIR)

        with self.assertRaises(ZMQBindError) as context:
            socket.connect("not-an-endpoint")

        self.assertEqual(context.exception.code, ErrorCode.EINVAL)
        self.assertTrue(context.exception.message)

        with self.assertRaises(ZMQBindError) as context:
            socket.bind("carrier-pigeon://nest")

        self.assertEqual(context.exception.code, ErrorCode.EPROTONOSUPPORT)

    @unittest.skipIf(sys.platform == "win32", "ipc endpoints are unix domain sockets")
    def test_ipc_path_too_long(self):
        socket = self._socket(SocketType.PAIR)

        with self.assertRaises(ZMQBindError) as context:
            socket.bind("ipc:///tmp/" + "a" * 200)

        self.assertEqual(context.exception.code, ErrorCode.ENAMETOOLONG)
        self.assertTrue(context.exception.message)

    def test_address_in_use(self):
        first = self._socket(SocketType.PAIR)
        first.bind("tcp://127.0.0.1:*")

        second = self._socket(SocketType.PAIR)
        with self.assertRaises(ZMQBindError) as context:
            second.bind(first.get_last_endpoint())

        self.assertEqual(context.exception.code, ErrorCode.EADDRINUSE)

    def test_unbind_and_disconnect(self):
        server = self._socket(SocketType.PAIR)
        server.bind("tcp://127.0.0.1:*")
        endpoint = server.get_last_endpoint()

        client = self._socket(SocketType.PAIR)
        client.connect(endpoint)
        client.disconnect(endpoint)

        server.unbind(endpoint)
        with self.assertRaises(ZMQBindError) as context:
            server.unbind(endpoint)

        self.assertEqual(context.exception.code, ErrorCode.ENOENT)

    def test_non_blocking_receive(self):
        server, _ = self._pair()

        with self.assertRaises(ZMQBindError) as context:
            server.recv(Flag.DONTWAIT)

        self.assertEqual(context.exception.code, ErrorCode.EAGAIN)

    def test_socket_type_is_stable(self):
        for socket_type in (SocketType.PAIR, SocketType.PUB, SocketType.SUB, SocketType.REQ, SocketType.REP,
                            SocketType.DEALER, SocketType.ROUTER, SocketType.PULL, SocketType.PUSH,
                            SocketType.XPUB, SocketType.XSUB):
            socket = self._socket(socket_type)
            socket.set_sndhwm(10)
            socket.set_rcvhwm(10)

            self.assertIs(socket.socket_type, socket_type)
            self.assertIs(socket.get_socket_type(), socket_type)

    def test_request_reply_state_machine(self):
        socket = self._socket(SocketType.REQ)

        with self.assertRaises(ZMQBindError) as context:
            socket.recv(Flag.DONTWAIT)

        self.assertEqual(context.exception.code, ErrorCode.EFSM)

    def test_close_is_idempotent(self):
        socket = self._context.socket(SocketType.PAIR)

        with mock.patch.object(lib(), "zmq_close", wraps=lib().zmq_close) as native_close:
            socket.close()
            socket.close()
            del socket

        self.assertEqual(native_close.call_count, 1)

    def test_with_block_closes(self):
        with self._context.socket(SocketType.PAIR) as socket:
            self.assertFalse(socket.closed)

        self.assertTrue(socket.closed)
        self.assertIsNone(socket.handle)

    def test_closed_socket(self):
        socket = self._context.socket(SocketType.PAIR)
        socket.close()

        with self.assertRaises(ZMQBindError) as context:
            socket.send(b"data")

        self.assertEqual(context.exception.code, ErrorCode.ENOTSOCK)

        with self.assertRaises(ZMQBindError) as context:
            socket.bind(unique_inproc_endpoint(self))

        self.assertEqual(context.exception.code, ErrorCode.ENOTSOCK)

    def test_receive_interrupted_by_term(self):
        socket = self._context.socket(SocketType.PAIR)
        socket.set_linger(0)
        socket.set_rcvtimeo(RECEIVE_TIMEOUT_MS)

        terminator = threading.Thread(target=self._context.term)
        terminator.start()

        with self.assertRaises(ZMQBindError) as context:
            socket.recv()

        socket.close()
        terminator.join()

        self.assertEqual(context.exception.code, ErrorCode.ETERM)
        self.assertTrue(self._context.closed)


class TestSocketReleaseFailure(unittest.TestCase):
    def setUp(self) -> None:
        setup_logger()
        logging_test_name(self)

        self._context = Context(io_threads=1)

    def tearDown(self) -> None:
        self._context.term()

    def _fail_release(self, socket, error_code: int = ErrorCode.EFAULT):
        handle = socket.handle

        with mock.patch.object(lib(), "zmq_close", return_value=-1), mock.patch.object(
            lib(), "zmq_errno", return_value=int(error_code)
        ):
            socket.__del__()

        self.assertTrue(socket.closed)
        lib().zmq_close(handle)

    def test_abort_policy(self):
        socket = self._context.socket(SocketType.PAIR)
        config = BindingConfig(release_failure_policy=ReleaseFailurePolicy.abort)

        with mock.patch("zmqbind.io.release.get_config", return_value=config), mock.patch(
            "zmqbind.io.release.os.abort"
        ) as abort, mock.patch("zmqbind.io.release.logging.shutdown"):
            with self.assertLogs(level="CRITICAL") as logs:
                self._fail_release(socket)

        abort.assert_called_once_with()
        self.assertIn("EFAULT", logs.output[0])

    def test_log_policy(self):
        socket = self._context.socket(SocketType.PAIR)
        config = BindingConfig(release_failure_policy=ReleaseFailurePolicy.log)

        with mock.patch("zmqbind.io.release.get_config", return_value=config), mock.patch(
            "zmqbind.io.release.os.abort"
        ) as abort:
            with self.assertLogs(level="CRITICAL") as logs:
                self._fail_release(socket)

        abort.assert_not_called()
        self.assertIn("implicit release failed", logs.output[0])

    def test_unknown_error_code_follows_policy(self):
        socket = self._context.socket(SocketType.PAIR)
        config = BindingConfig(release_failure_policy=ReleaseFailurePolicy.abort)

        with mock.patch("zmqbind.io.release.get_config", return_value=config), mock.patch(
            "zmqbind.io.release.os.abort"
        ) as abort, mock.patch("zmqbind.io.release.logging.shutdown"):
            with self.assertLogs(level="CRITICAL") as logs:
                self._fail_release(socket, ZMQ_HAUSNUMERO + 999)

        abort.assert_called_once_with()
        self.assertIn("unknown error code", logs.output[0])

    def test_explicit_close_raises(self):
        socket = self._context.socket(SocketType.PAIR)
        handle = socket.handle

        with mock.patch.object(lib(), "zmq_close", return_value=-1), mock.patch.object(
            lib(), "zmq_errno", return_value=int(ErrorCode.EFAULT)
        ), mock.patch("zmqbind.io.release.os.abort") as abort:
            with self.assertRaises(ZMQBindError) as context:
                socket.close()

            socket.close()

        lib().zmq_close(handle)

        abort.assert_not_called()
        self.assertEqual(context.exception.code, ErrorCode.EFAULT)
