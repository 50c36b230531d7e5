import mock
import unittest

import socket

from nsqpub import connection
from nsqpub import constants
from nsqpub import response
from nsqpub import util


class MockSocket(mock.Mock):
    '''The server-side socket. Read/write are from the server's perspective'''
    def __init__(self, *_, **__):
        mock.Mock.__init__(self)
        self._to_client_buffer = b''
        self._to_server_buffer = b''
        # When set, the most bytes a single send or recv will move
        self.send_size = None
        self.recv_size = None

    # From the server's perspective
    def write(self, message):
        self._to_client_buffer += message

    def read(self):
        data, self._to_server_buffer = self._to_server_buffer, b''
        return data

    # From the client's perspective
    def send(self, message):
        sent = message[:self.send_size] if self.send_size else message
        self._to_server_buffer += sent
        return len(sent)

    def recv(self, limit):
        if self.recv_size:
            limit = min(limit, self.recv_size)
        data, self._to_client_buffer = (
            self._to_client_buffer[:limit], self._to_client_buffer[limit:])
        return data

    def response(self, message):
        '''Send the provided message as a response'''
        self.write(response.Response.pack(message))

    def error(self, exception):
        '''Send an error'''
        self.write(response.Error.pack(exception.name.encode('UTF-8')))


class MockedSocketTest(unittest.TestCase):
    '''A test where socket is patched'''
    def setUp(self):
        self.socket = MockSocket()
        patcher = mock.patch(
            'nsqpub.connection.socket.socket', return_value=self.socket)
        self.factory = patcher.start()
        self.addCleanup(patcher.stop)
        self.connection = connection.Connection('localhost', 1234)

    def connect(self):
        '''Establish the connection and consume the magic'''
        self.connection.connect()
        self.assertEqual(self.socket.read(), constants.MAGIC_V2)


class FakeServer(object):
    '''A fake nsqd listening on a real localhost port'''
    def __init__(self):
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind(('127.0.0.1', 0))
        self._listener.listen(1)
        self.port = self._listener.getsockname()[1]
        # Our accept(2)'d connection
        self._connection = None

    def accept(self):
        '''Accept a connection and save it'''
        self._listener.settimeout(1.0)
        self._connection = self._listener.accept()[0]
        self._connection.settimeout(1.0)

    def close(self):
        '''Close our connection'''
        if self._connection:
            self._connection.close()
        self._listener.close()

    def send(self, data):
        '''Send the provided data on the socket'''
        return self._connection.sendall(data)

    def read(self, size):
        '''Read exactly size bytes from the connection'''
        data = b''
        while len(data) < size:
            packet = self._connection.recv(size - len(data))
            assert packet, 'Client hung up after %r' % data
            data += packet
        return data

    def assertMagic(self):
        '''Read the magic header'''
        data = self.read(len(constants.MAGIC_V2))
        assert data == constants.MAGIC_V2, '%r not magic' % data

    def readCommand(self, name):
        '''Read a command line and return the topic it names'''
        prefix = name + b' '
        assert self.read(len(prefix)) == prefix
        topic = b''
        char = self.read(1)
        while char != constants.NL:
            topic += char
            char = self.read(1)
        return topic

    def readPub(self):
        '''Read a PUB command, returning (topic, message)'''
        topic = self.readCommand(constants.PUB)
        length = util.unpack_length(self.read(4))
        return topic, self.read(length)

    def readMpub(self):
        '''Read an MPUB command, returning (topic, messages)'''
        topic = self.readCommand(constants.MPUB)
        self.read(4)
        count = util.unpack_length(self.read(4))
        messages = []
        for _ in range(count):
            length = util.unpack_length(self.read(4))
            messages.append(self.read(length))
        return topic, messages

    def response(self, message):
        '''Send the provided message as a response'''
        self.send(response.Response.pack(message))

    def error(self, exception):
        '''Send an error'''
        self.send(response.Error.pack(exception.name.encode('UTF-8')))


class FakeServerTest(unittest.TestCase):
    '''A test with a FakeServer and a connection to it'''
    timeout = 0.5

    def setUp(self):
        self.server = FakeServer()
        self.addCleanup(self.server.close)
        self.connection = connection.Connection(
            '127.0.0.1', self.server.port, self.timeout)
        self.addCleanup(self.connection.close)

    def accept(self):
        '''Connect the client, accept it, and consume the magic'''
        self.connection.connect()
        self.server.accept()
        self.server.assertMagic()
