from . import command
from . import constants
from . import errors
from . import logger
from . import util
from .exceptions import (
    ConnectionClosedException, ProtocolException, TransportException)
from .response import Response

from collections import namedtuple
import logging
import socket
import struct
import sys

import six


class Timeout(namedtuple('Timeout', ('sec', 'usec'))):
    '''The receive timeout on a connection, in the shape of a timeval'''
    __slots__ = ()

    @classmethod
    def create(cls, value=None):
        '''Make a timeout from None, a Timeout, a dict or a number of seconds.

        A dict is merged over the defaults, so {'sec': 2} still uses the
        default microseconds.'''
        if value is None:
            timeout = cls(constants.SOCKET_TIMEOUT_S, constants.SOCKET_TIMEOUT_US)
        elif isinstance(value, cls):
            timeout = value
        elif isinstance(value, dict):
            options = {
                'sec': constants.SOCKET_TIMEOUT_S,
                'usec': constants.SOCKET_TIMEOUT_US
            }
            options.update(value)
            timeout = cls(**options)
        elif isinstance(value, (six.integer_types, float)):
            sec = int(value)
            timeout = cls(sec, int(round((value - sec) * 1000000)))
        else:
            raise TypeError('Cannot make a timeout from %r' % (value,))

        if timeout.sec < 0 or timeout.usec < 0:
            raise ValueError('Timeout must not be negative: %r' % (timeout,))
        return timeout

    @property
    def seconds(self):
        '''The timeout as a number of seconds'''
        return self.sec + self.usec / 1000000.0

    def pack(self):
        '''The SO_RCVTIMEO option value'''
        if sys.platform == 'win32':
            # Windows takes a DWORD of milliseconds rather than a timeval
            return struct.pack('L', self.sec * 1000 + self.usec // 1000)
        return struct.pack('ll', self.sec, self.usec)


class Connection(object):
    '''A socket-based publishing connection to a single nsqd.

    The socket is established lazily on first use. Each command is written in
    full and its one response frame is read before the call returns, so there
    is never more than one outstanding command. A connection belongs to one
    caller: it is not safe to share between threads; use one connection per
    thread instead.

    Reads time out according to `timeout`. Writes have no timeout and block
    until the operating system gives up on them.

    Any failure after the socket is established closes the connection, and a
    closed connection refuses further use. Build a new one to retry. Prefer
    `close` (or a `with` block) over relying on garbage collection.'''
    UNCONNECTED = 'unconnected'
    CONNECTED = 'connected'
    CLOSED = 'closed'

    def __init__(self, host, port=constants.DEFAULT_PORT, timeout=None):
        assert isinstance(host, six.string_types), host
        assert isinstance(port, int), port

        # Our host and port
        self.host = host
        self.port = port
        # How long a blocking read may take
        self.timeout = Timeout.create(timeout)
        self._socket = None
        self.state = self.UNCONNECTED

    def __str__(self):
        return '%s:%s' % (self.host, self.port)

    def __repr__(self):
        return '<Connection %s (%s)>' % (self, self.state)

    def __enter__(self):
        return self

    def __exit__(self, typ, value, trace):
        self.close()

    def __del__(self):
        # Safety net only, without logging since it may run at shutdown
        sock = getattr(self, '_socket', None)
        if sock is not None:
            self._socket = None
            self.state = self.CLOSED
            self._discard(sock)

    def alive(self):
        '''Returns True if this connection is alive'''
        return self._socket is not None

    def connect(self):
        '''Establish a connection, returning the socket'''
        # Don't re-establish existing connections
        if self._socket is not None:
            return self._socket
        if self.state == self.CLOSED:
            raise ConnectionClosedException('Connection to %s is closed' % self)

        logger.info('Connecting to %s', self)
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except socket.error as exc:
            raise errors.translate('Failed to open TCP stream socket', exc)

        try:
            self._connect(sock)
            # Must send a protocol version before any command
            self._sendall(sock, constants.MAGIC_V2)
        except Exception:
            self._discard(sock)
            raise

        self._socket = sock
        self.state = self.CONNECTED
        return sock

    def _connect(self, sock):
        '''Connect the provided socket and apply our receive timeout'''
        try:
            sock.connect((self.host, self.port))
        except socket.error as exc:
            raise errors.translate('Failed to connect socket to %s' % self, exc)
        try:
            sock.setsockopt(
                socket.SOL_SOCKET, socket.SO_RCVTIMEO, self.timeout.pack())
        except socket.error as exc:
            raise errors.translate(
                'Failed to set socket stream timeout option', exc)

    @staticmethod
    @errors.wrap('Failed to write buffer to socket')
    def _send(sock, data):
        return sock.send(data)

    @staticmethod
    @errors.wrap('Failed to read data from socket')
    def _recv(sock, count):
        return sock.recv(count)

    def _sendall(self, sock, data):
        '''Send until every byte is written'''
        total = 0
        while total < len(data):
            total += self._send(sock, data[total:])
        return total

    def write_all(self, data):
        '''Write the whole buffer to nsqd'''
        sock = self.connect()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('Sending to %s: %s', self, util.hexify(data))
        try:
            return self._sendall(sock, data)
        except TransportException:
            self.close()
            raise

    def read_exact(self, count):
        '''Read exactly count bytes, or fail'''
        sock = self.connect()
        parts = []
        remaining = count
        try:
            while remaining:
                data = self._recv(
                    sock, min(remaining, constants.RECV_CHUNK_SIZE))
                if not data:
                    raise TransportException(
                        'Failed to read data from socket: closed by %s' % self)
                parts.append(data)
                remaining -= len(data)
        except TransportException:
            self.close()
            raise
        return b''.join(parts)

    def read_response(self):
        '''Read the single frame sent in response to a command'''
        length = util.unpack_length(self.read_exact(4))
        if length <= constants.FRAME_TYPE_SIZE:
            self.close()
            logger.warning('Invalid frame length %s from %s', length, self)
            raise ProtocolException('invalid length', length)

        frame_type = util.unpack_length(self.read_exact(4))
        if frame_type not in (
                constants.FRAME_TYPE_RESPONSE, constants.FRAME_TYPE_ERROR):
            self.close()
            logger.warning('Unsupported frame type %s from %s', frame_type, self)
            raise ProtocolException('unsupported frame type', frame_type)

        res = Response.from_frame(
            frame_type, self.read_exact(length - constants.FRAME_TYPE_SIZE))
        if res.ok:
            logger.debug('Got %s from %s', res, self)
        else:
            logger.warning('Got %s from %s', res, self)
        return res

    def request(self, data):
        '''Send a command and return its response'''
        self.write_all(data)
        return self.read_response()

    def pub(self, topic, message):
        '''Publish to a topic'''
        return self.request(command.pub(topic, message))

    def mpub(self, topic, messages):
        '''Publish multiple messages to a topic'''
        return self.request(command.mpub(topic, messages))

    def close(self):
        '''Close our connection. Safe to call more than once'''
        sock, self._socket = self._socket, None
        if self.state != self.CLOSED:
            logger.info('Closing connection to %s', self)
        self.state = self.CLOSED
        if sock is not None:
            self._discard(sock)

    @staticmethod
    def _discard(sock):
        '''Shut down and close a socket, ignoring errors'''
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except socket.error:
            pass
        try:
            sock.close()
        except socket.error:
            pass
