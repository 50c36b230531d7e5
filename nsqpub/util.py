'''Some utilities used around town'''

from collections import namedtuple
import string
import struct

import six

from .constants import FRAME_TYPE_SIZE
from .exceptions import ProtocolException


# A decoded frame. The body is len(body) == length - FRAME_TYPE_SIZE bytes
Frame = namedtuple('Frame', ('length', 'frame_type', 'body'))


def pack_length(length):
    '''Pack a length as a 4-byte unsigned big-endian integer'''
    return struct.pack('>L', length)


def unpack_length(raw):
    '''Unpack a 4-byte unsigned big-endian integer'''
    return struct.unpack('>L', raw)[0]


def pack_string(message):
    '''Pack a single message in the TCP protocol format'''
    # [ 4-byte message size ][ N-byte binary data ]
    return pack_length(len(message)) + message


def pack_iterable(messages):
    '''Pack an iterable of messages in the TCP protocol format'''
    # [ 4-byte body size ]
    # [ 4-byte num messages ]
    # [ 4-byte message #1 size ][ N-byte binary data ]
    #      ... (repeated <num_messages> times)
    # The body size covers only the packed messages, not the count
    packed = [pack_string(message) for message in messages]
    block = b''.join(packed)
    return pack_length(len(block)) + pack_length(len(packed)) + block


def payload(message):
    '''The raw bytes to send for the provided message'''
    if isinstance(message, six.binary_type):
        return message
    elif isinstance(message, six.text_type):
        return message.encode('UTF-8')
    elif hasattr(message, 'payload'):
        data = message.payload()
        if isinstance(data, six.text_type):
            data = data.encode('UTF-8')
        if not isinstance(data, six.binary_type):
            raise TypeError('Payload of %r is not bytes' % (message,))
        return data
    raise TypeError('Cannot publish %r' % (message,))


def decode_frame(raw):
    '''Decode a complete frame, including its length prefix'''
    if len(raw) < 4 + FRAME_TYPE_SIZE:
        raise ProtocolException('truncated frame', len(raw))
    length = unpack_length(raw[:4])
    if length <= FRAME_TYPE_SIZE:
        raise ProtocolException('invalid length', length)
    frame_type = unpack_length(raw[4:4 + FRAME_TYPE_SIZE])
    body = raw[4 + FRAME_TYPE_SIZE:4 + length]
    if len(body) != length - FRAME_TYPE_SIZE:
        raise ProtocolException('truncated frame', len(raw))
    return Frame(length, frame_type, body)


def normalize(body):
    '''The text of a frame body, as nsq publishers have always read it.

    Every byte is read as a signed char and only positive values are kept, so
    NUL and any byte with the high bit set are dropped. What's left is trimmed
    of surrounding whitespace.'''
    kept = bytearray(char for char in six.iterbytes(body) if 0 < char < 128)
    return kept.decode('ascii').strip(' \t\n\r\x0b')


def hexify(message):
    '''Print out printable characters, but others in hex'''
    hexified = []
    for char in six.iterbytes(message):
        symbol = chr(char)
        if (symbol in '\n\r \t') or (symbol not in string.printable):
            hexified.append('\\x%02x' % char)
        else:
            hexified.append(symbol)
    return ''.join(hexified)
