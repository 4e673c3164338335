import errno
import os
import pickle
import unittest
from unittest import mock

from zmqbind.io.error import (
    ZMQ_HAUSNUMERO,
    ErrorCode,
    UnknownErrorCodeError,
    ZMQBindError,
    ZMQBindInvariantError,
    translate_errno,
)
from zmqbind.io.constants import SocketType
from zmqbind.io.context import Context
from zmqbind.io.library import lib
from zmqbind.utility.logging.utility import setup_logger
from tests.utility.utility import logging_test_name


class TestErrorCode(unittest.TestCase):
    def setUp(self) -> None:
        setup_logger()
        logging_test_name(self)

    def test_libzmq_specific_codes(self):
        self.assertEqual(ErrorCode.EFSM, ZMQ_HAUSNUMERO + 51)
        self.assertEqual(ErrorCode.ENOCOMPATPROTO, ZMQ_HAUSNUMERO + 52)
        self.assertEqual(ErrorCode.ETERM, ZMQ_HAUSNUMERO + 53)
        self.assertEqual(ErrorCode.EMTHREAD, ZMQ_HAUSNUMERO + 54)

    def test_platform_codes(self):
        self.assertEqual(ErrorCode.EINVAL, errno.EINVAL)
        self.assertEqual(ErrorCode.EAGAIN, errno.EAGAIN)

        self.assertEqual(ErrorCode.ENAMETOOLONG, errno.ENAMETOOLONG)
        self.assertEqual(ErrorCode.EACCES, errno.EACCES)
        self.assertEqual(ErrorCode.EPERM, errno.EPERM)

        for name in ("ENOTSUP", "EPROTONOSUPPORT", "EADDRINUSE", "ECONNREFUSED", "ENOTSOCK"):
            if hasattr(errno, name):
                self.assertEqual(ErrorCode[name], getattr(errno, name))

    def test_describe_is_native(self):
        for code in ErrorCode:
            description = code.describe()
            self.assertIsInstance(description, str)
            self.assertTrue(description)

        self.assertEqual(ErrorCode.ETERM.describe(), lib().zmq_strerror(int(ErrorCode.ETERM)).decode())

    def test_from_native(self):
        self.assertIs(ErrorCode.from_native(int(ErrorCode.EFSM)), ErrorCode.EFSM)

        with self.assertRaises(UnknownErrorCodeError) as context:
            ErrorCode.from_native(ZMQ_HAUSNUMERO + 999)

        self.assertEqual(context.exception.value, ZMQ_HAUSNUMERO + 999)


class TestTranslateErrno(unittest.TestCase):
    def setUp(self) -> None:
        setup_logger()
        logging_test_name(self)

    def test_translate_known_code(self):
        with mock.patch.object(lib(), "zmq_errno", return_value=int(ErrorCode.ETERM)):
            error = translate_errno()

        self.assertIsInstance(error, ZMQBindError)
        self.assertEqual(error.code, ErrorCode.ETERM)
        self.assertEqual(error.errno, ErrorCode.ETERM)
        self.assertEqual(error.message, ErrorCode.ETERM.describe())
        self.assertIn("ETERM", str(error))

    def test_translate_unknown_code_is_not_a_transport_error(self):
        with mock.patch.object(lib(), "zmq_errno", return_value=ZMQ_HAUSNUMERO + 999):
            with self.assertRaises(ZMQBindInvariantError) as context:
                translate_errno()

        self.assertNotIsInstance(context.exception, ZMQBindError)

    def test_error_pickles(self):
        error = ZMQBindError(ErrorCode.EAGAIN, "Resource temporarily unavailable")
        restored = pickle.loads(pickle.dumps(error))

        self.assertEqual(restored.code, ErrorCode.EAGAIN)
        self.assertEqual(restored.message, "Resource temporarily unavailable")

    def test_errno_survives_python_code(self):
        context = Context(io_threads=1)
        socket = context.socket(SocketType.PAIR)
        try:
            self.assertEqual(lib().zmq_connect(socket.handle, b"not-an-endpoint"), -1)

            # the failed stat sets the C errno to ENOENT before the error is translated
            with self.assertRaises(FileNotFoundError):
                os.stat(os.path.join(os.sep, "zmqbind", "does", "not", "exist"))

            self.assertEqual(translate_errno().code, ErrorCode.EINVAL)
        finally:
            socket.close()
            context.term()
