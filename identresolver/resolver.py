# -*- encoding: utf-8 -*-
"""
`resolver` -- Resolve Identifiers to Storage Addresses
======================================================

Given an image identifier such as ``uva-lib:12345``, work out which bucket
and key hold the source image::

    >>> resolve('uva-lib:12345', {'primary_bucket': 'iiif', 'secondary_bucket': 'mandala'})
    StorageAddress(bucket='iiif', key='uva-lib/12/34/5/12345.jp2')

Identifiers that no rule knows about resolve to ``NOT_FOUND``, whose bucket
and key are both ``'none'``. That's an ordinary outcome, not an exception;
callers should treat it as a missing image.
"""
from logging import getLogger

import attr

from identresolver import constants
from identresolver.config import (
    BucketConfig,
    configure_logging,
    get_section,
    import_object,
    read_config,
)
from identresolver.diagnostics import LoggingSink, ResolutionEvent, emit
from identresolver.resolver_exception import ConfigError
from identresolver.rules import RuleTable
from identresolver.schemes import DEFAULT_RULE_TABLE


logger = getLogger(__name__)


@attr.s(slots=True, frozen=True)
class StorageAddress(object):
    bucket = attr.ib()
    key = attr.ib()

    @property
    def is_found(self):
        return self != NOT_FOUND

    @property
    def uri(self):
        return 's3://%s/%s' % (self.bucket, self.key)

    def to_dict(self):
        return attr.asdict(self)


NOT_FOUND = StorageAddress(constants.NOT_FOUND_VALUE, constants.NOT_FOUND_VALUE)


def resolve(ident, target_config, rule_table=DEFAULT_RULE_TABLE, sink=None):
    """
    Find the storage address of an identifier.

    Args:
        ident (str):
            The identifier for the image.
        target_config (BucketConfig or dict):
            Bucket names; a dict needs ``primary_bucket`` and
            ``secondary_bucket``.
        rule_table (RuleTable):
            Rules to try, in order.
        sink:
            Receives one ``ResolutionEvent``; defaults to a ``LoggingSink``.
    Returns:
        StorageAddress, ``NOT_FOUND`` if no rule matches.
    Raises:
        ConfigError if ``target_config`` lacks a bucket name.
    """
    buckets = BucketConfig.from_mapping(target_config)
    if sink is None:
        sink = LoggingSink()

    rule, key = (None, None)
    if isinstance(ident, str):
        rule, key = rule_table.first_match(ident)

    if rule is None:
        emit(sink, ResolutionEvent(ident, NOT_FOUND, None))
        return NOT_FOUND

    address = StorageAddress(buckets.select(rule.bucket), key)
    emit(sink, ResolutionEvent(ident, address, rule.name))
    return address


class Resolver(object):
    """
    Resolves identifiers against one set of bucket names and a rule table.

    Instances hold no per-request state and can be shared between threads.
    The rule table may be replaced with :meth:`reload`; a resolution that is
    already running finishes with the table it started with.
    """

    def __init__(self, buckets, rule_table=None, sink=None):
        self.buckets = BucketConfig.from_mapping(buckets)
        self.sink = sink if sink is not None else LoggingSink()
        self._rule_table = self._check_table(
            rule_table if rule_table is not None else DEFAULT_RULE_TABLE
        )
        logger.debug(
            'Resolver initialized with buckets %s/%s and %d rules',
            self.buckets.primary, self.buckets.secondary, len(self._rule_table)
        )

    @staticmethod
    def _check_table(rule_table):
        if not isinstance(rule_table, RuleTable):
            raise ConfigError('Expected a RuleTable, got %r' % (rule_table,))
        return rule_table

    @property
    def rule_table(self):
        return self._rule_table

    def reload(self, rule_table):
        """Swap in a whole new rule table."""
        self._rule_table = self._check_table(rule_table)
        logger.info('Rule table reloaded, %d rules', len(rule_table))

    def resolve(self, ident):
        return resolve(ident, self.buckets, self._rule_table, self.sink)

    def __call__(self, ident):
        return self.resolve(ident)


def create_resolver(config_file_path=None, environ=None, sink=None):
    """
    Build a Resolver from a config file, setting up logging on the way.

    Args:
        config_file_path (str):
            Defaults to the config bundled with the package.
        environ (dict):
            Used for ``${VAR}`` interpolation; defaults to ``os.environ``.
    Raises:
        ConfigError for anything missing or malformed.
    """
    config = read_config(config_file_path, environ)
    configure_logging(get_section(config, 'logging'))

    buckets = BucketConfig.from_config(config)

    resolver_config = get_section(config, 'resolver') if 'resolver' in config else {}
    rule_table = import_object(
        resolver_config.get('rule_table', constants.DEFAULT_RULE_TABLE)
    )

    resolver = Resolver(buckets, rule_table, sink)
    logger.info(
        'Resolving into primary bucket %s and secondary bucket %s',
        buckets.primary, buckets.secondary
    )
    return resolver
