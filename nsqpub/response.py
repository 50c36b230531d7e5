import inspect

from .constants import FRAME_TYPE_RESPONSE, FRAME_TYPE_ERROR
from .exceptions import ProtocolException
from . import exceptions
from . import util


class Response(object):
    '''A response from NSQ'''
    FRAME_TYPE = FRAME_TYPE_RESPONSE

    __slots__ = ('frame_type', 'data')

    @staticmethod
    def from_frame(frame_type, body):
        '''Return a new response from a frame type and its raw body'''
        if frame_type == FRAME_TYPE_RESPONSE:
            return Response(frame_type, util.normalize(body))
        elif frame_type == FRAME_TYPE_ERROR:
            return Error(frame_type, util.normalize(body))
        else:
            raise ProtocolException('unsupported frame type', frame_type)

    @staticmethod
    def from_raw(raw):
        '''Return a new response from a complete, length-prefixed frame'''
        frame = util.decode_frame(raw)
        return Response.from_frame(frame.frame_type, frame.body)

    @classmethod
    def pack(cls, data):
        '''Pack the provided data into a frame of this type'''
        return util.pack_length(len(data) + 4) + util.pack_length(
            cls.FRAME_TYPE) + data

    def __init__(self, frame_type, data):
        self.data = data
        self.frame_type = frame_type

    def __str__(self):
        return '%s - %s' % (self.__class__.__name__, self.data)

    def __eq__(self, other):
        return (
            isinstance(other, Response) and
            (self.frame_type == other.frame_type) and
            (self.data == other.data))

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    @property
    def ok(self):
        '''Whether nsqd accepted the command'''
        return self.frame_type == FRAME_TYPE_RESPONSE


class Error(Response):
    '''An error'''
    FRAME_TYPE = FRAME_TYPE_ERROR

    __slots__ = ()

    # A mapping of the response string to the appropriate exception
    mapping = {}

    @classmethod
    def find(cls, name):
        '''Find the exception class by name'''
        if not cls.mapping:  # pragma: no branch
            for _, obj in inspect.getmembers(exceptions):
                if inspect.isclass(obj):
                    if issubclass(obj, exceptions.NSQException):  # pragma: no branch
                        if hasattr(obj, 'name'):
                            cls.mapping[obj.name] = obj
        klass = cls.mapping.get(name)
        if klass is None:
            raise TypeError('No matching exception for %s' % name)
        return klass

    def exception(self):
        '''Return an instance of the corresponding exception'''
        code, _, message = self.data.partition(' ')
        return self.find(code)(message)
