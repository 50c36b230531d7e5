'''Exception classes'''


class NSQException(Exception):
    '''Base class for all exceptions in this library'''


class InvalidArgumentException(NSQException, ValueError):
    '''The caller provided arguments that can't be turned into a command'''


class TransportException(NSQException):
    '''A socket operation failed'''
    def __init__(self, message, errno=None):
        NSQException.__init__(self, message, errno)
        self.message = message
        self.errno = errno

    def __str__(self):
        if self.errno is None:
            return self.message
        return '%s [errno %s]' % (self.message, self.errno)


class ConnectionClosedException(TransportException):
    '''Trying to use a closed connection as if it's alive'''


class ProtocolException(NSQException):
    '''The bytes read from nsqd violate the framing rules'''
    def __init__(self, reason, value=None):
        NSQException.__init__(self, reason, value)
        self.reason = reason
        self.value = value

    def __str__(self):
        if self.value is None:
            return self.reason
        return '%s: %s' % (self.reason, self.value)


class InvalidException(NSQException):
    '''Exception for E_INVALID'''
    name = 'E_INVALID'


class BadBodyException(NSQException):
    '''Exception for E_BAD_BODY'''
    name = 'E_BAD_BODY'


class BadTopicException(NSQException):
    '''Exception for E_BAD_TOPIC'''
    name = 'E_BAD_TOPIC'


class BadMessageException(NSQException):
    '''Exception for E_BAD_MESSAGE'''
    name = 'E_BAD_MESSAGE'


class PubFailedException(NSQException):
    '''Exception for E_PUB_FAILED'''
    name = 'E_PUB_FAILED'


class MpubFailedException(NSQException):
    '''Exception for E_MPUB_FAILED'''
    name = 'E_MPUB_FAILED'
