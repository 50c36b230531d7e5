'''Build the bytes of the publish commands'''

import six

from . import constants
from . import util
from .exceptions import InvalidArgumentException


def topic_name(topic):
    '''The topic as bytes'''
    if isinstance(topic, six.text_type):
        return topic.encode('UTF-8')
    return topic


def pub(topic, message):
    '''A PUB command for a single message'''
    return (
        constants.PUB + b' ' + topic_name(topic) + constants.NL +
        util.pack_string(util.payload(message)))


def mpub(topic, messages):
    '''An MPUB command for one or more messages'''
    payloads = [util.payload(message) for message in messages]
    if not payloads:
        raise InvalidArgumentException(
            'Expecting at least one message to publish')
    return (
        constants.MPUB + b' ' + topic_name(topic) + constants.NL +
        util.pack_iterable(payloads))
