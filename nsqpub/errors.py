'''Turn socket failures into TransportExceptions'''

import os
import socket

from decorator import decorator

from .exceptions import TransportException


def translate(context, exc):
    '''A TransportException for the failed socket operation'''
    code = getattr(exc, 'errno', None)
    reason = getattr(exc, 'strerror', None)
    if not reason:
        reason = os.strerror(code) if code is not None else (str(exc) or repr(exc))
    return TransportException('%s: %s' % (context, reason), code)


def wrap(context):
    '''Decorate a function so socket errors surface as TransportExceptions'''
    @decorator
    def wrapper(function, *args, **kwargs):
        try:
            return function(*args, **kwargs)
        except socket.error as exc:
            raise translate(context, exc)
    return wrapper
