# -*- encoding: utf-8 -*-
"""
`diagnostics` -- Record every resolution attempt
================================================

The resolver hands a :class:`ResolutionEvent` to a sink for every identifier
it sees. Any object with an ``emit(event)`` method will do as a sink; the
default writes one log line per event.
"""
from logging import getLogger

import attr


logger = getLogger(__name__)


@attr.s(slots=True, frozen=True)
class ResolutionEvent(object):
    """
    Attributes:
        ident: the identifier as supplied.
        address (StorageAddress): where it resolved to; the not-found
            address if nothing matched.
        rule (str): name of the matching rule, or None.
    """
    ident = attr.ib()
    address = attr.ib()
    rule = attr.ib()

    @property
    def matched(self):
        return self.rule is not None


class LoggingSink(object):
    """
    Writes successes at INFO and failures at ERROR. Failures always carry
    the marker ``missing rewrite`` so they can be grepped for.
    """

    def __init__(self, log=None):
        self.log = log or logger

    def emit(self, event):
        if event.matched:
            self.log.info(
                'rewrite [%s] -> [s3://%s/%s] (%s)',
                event.ident, event.address.bucket, event.address.key, event.rule
            )
        else:
            self.log.error('missing rewrite [%s]', event.ident)


class NullSink(object):
    def emit(self, event):
        pass


def emit(sink, event):
    """
    Pass ``event`` to ``sink``. A sink that blows up is logged and otherwise
    ignored, so the caller still gets its address.
    """
    try:
        sink.emit(event)
    except Exception:
        logger.exception('Diagnostics sink %r failed on %r', sink, event)
