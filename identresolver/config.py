# -*- encoding: utf-8 -*-
"""
`config` -- Reading the config file and setting up logging
==========================================================

The config file is read with ConfigObj. The process environment is added as
the ``DEFAULT`` section, so values may refer to environment variables::

    [buckets]
    primary_bucket = '${IIIF_BUCKET_NAME}'

Everything here runs at startup. Problems are raised as ``ConfigError`` so
that a bad deployment fails before it serves a single request.
"""
from collections.abc import Mapping
import importlib
import logging
from logging.handlers import RotatingFileHandler
import os
import sys

import attr
from configobj import ConfigObj, ConfigObjError

from identresolver import constants
from identresolver.resolver_exception import ConfigError


CONFIG_FILE_NAME = 'identresolver.conf'


def _data_directory_path():
    return os.path.join(os.path.dirname(os.path.realpath(__file__)), 'data')


def default_config_file_path():
    return os.path.join(_data_directory_path(), CONFIG_FILE_NAME)


def read_config(config_file_path=None, environ=None):
    if not config_file_path:
        config_file_path = default_config_file_path()
    if environ is None:
        environ = os.environ

    try:
        config = ConfigObj(
            config_file_path, unrepr=True, interpolation='template', file_error=True
        )
    except (IOError, ConfigObjError) as err:
        raise ConfigError('Could not read config file %s: %s' % (config_file_path, err))

    # add the OS environment variables as the DEFAULT section to support
    # interpolating their values into other keys. Copy them so the config
    # object can't modify the environment.
    config['DEFAULT'] = {key: val for (key, val) in environ.items() if key != 'PS1'}
    return config


def get_section(config, name):
    """Returns a plain dict of a config section, with interpolation done."""
    if name not in config:
        raise ConfigError('Missing config section [%s]' % name)
    section = config[name]
    try:
        return section.dict()
    except ConfigObjError as err:
        raise ConfigError('Bad value in config section [%s]: %s' % (name, err))


@attr.s(slots=True, frozen=True)
class BucketConfig(object):
    """The names of the two buckets a rule may select."""
    primary = attr.ib()
    secondary = attr.ib()

    @classmethod
    def from_mapping(cls, mapping):
        """
        Build from a mapping with ``primary_bucket`` and ``secondary_bucket``
        keys, such as the ``[buckets]`` section of the config file.

        Raises:
            ConfigError if ``mapping`` isn't a mapping, or either name is
            missing or empty.
        """
        if isinstance(mapping, cls):
            return mapping
        if not isinstance(mapping, Mapping):
            raise ConfigError(
                'Bucket names must be given as a mapping, got %r' % (mapping,)
            )

        names = {}
        missing = []
        for selector in constants.BUCKET_SELECTORS:
            key = constants.BUCKET_CONFIG_KEYS[selector]
            value = mapping.get(key)
            if not isinstance(value, str) or not value.strip():
                missing.append(key)
            else:
                names[selector] = value.strip()

        if missing:
            raise ConfigError(
                'Missing bucket names: %r (set %s and %s in the environment?)' %
                (','.join(missing), constants.PRIMARY_BUCKET_ENV, constants.SECONDARY_BUCKET_ENV)
            )
        return cls(**names)

    @classmethod
    def from_config(cls, config):
        return cls.from_mapping(get_section(config, 'buckets'))

    def select(self, selector):
        return getattr(self, selector)


def import_object(qname):
    """
    Imports ``package.module.name`` and returns ``name``.
    """
    module_name, _, name = qname.rpartition('.')
    if not module_name:
        raise ConfigError('%r is not a dotted path' % qname)
    try:
        module = importlib.import_module(module_name)
        return getattr(module, name)
    except (ImportError, AttributeError) as err:
        raise ConfigError('Could not import %s: %s' % (qname, err))


LOG_FILE_NAME = 'identresolver.log'

REQUIRED_LOGGING_KEYS = ('log_to', 'log_level', 'format')
REQUIRED_FILE_LOGGING_KEYS = ('log_dir', 'max_size', 'max_backups')


class WarningAndAboveFilter(logging.Filter):
    """Passes WARNING and worse, for the stderr handler."""
    def filter(self, record):
        return record.levelno >= logging.WARNING


class InfoAndBelowFilter(logging.Filter):
    """Passes INFO and DEBUG, for the stdout handler."""
    def filter(self, record):
        return record.levelno <= logging.INFO


def _require(config, keys, context):
    missing = [key for key in keys if key not in config]
    if missing:
        raise ConfigError('%s is missing %s' % (context, ', '.join(missing)))


def _check_logging_section(config):
    _require(config, REQUIRED_LOGGING_KEYS, '[logging]')

    log_to = config['log_to']
    if log_to not in ('file', 'console'):
        raise ConfigError(
            "[logging] log_to must be 'file' or 'console', not %r" % (log_to,)
        )
    if log_to == 'file':
        _require(config, REQUIRED_FILE_LOGGING_KEYS, "[logging] with log_to='file'")


def _console_handlers(formatter):
    # Problems go to stderr, progress to stdout.
    handlers = []
    for stream, level_filter in ((sys.__stderr__, WarningAndAboveFilter()),
                                 (sys.__stdout__, InfoAndBelowFilter())):
        handler = logging.StreamHandler(stream)
        handler.addFilter(level_filter)
        handler.setFormatter(formatter)
        handlers.append(handler)
    return handlers


def _file_handler(config, formatter):
    handler = RotatingFileHandler(
        os.path.join(config['log_dir'], LOG_FILE_NAME),
        maxBytes=config['max_size'],
        backupCount=config['max_backups'],
        delay=True,
    )
    handler.setFormatter(formatter)
    return handler


def configure_logging(config):
    """
    Set up the root logger from the ``[logging]`` section.

    Handlers are only attached the first time round; calling this again just
    updates the level. An unknown level name falls back to DEBUG.
    """
    _check_logging_section(config)

    root = logging.getLogger()
    try:
        root.setLevel(config['log_level'])
    except ValueError:
        root.setLevel(logging.DEBUG)

    if getattr(root, 'handler_set', False):
        return root

    formatter = logging.Formatter(fmt=config['format'])
    if config['log_to'] == 'file':
        handlers = [_file_handler(config, formatter)]
    else:
        handlers = _console_handlers(formatter)
    for handler in handlers:
        root.addHandler(handler)

    root.handler_set = True
    return root
