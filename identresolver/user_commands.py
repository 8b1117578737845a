#!/usr/bin/env python
# -*- encoding: utf-8 -*-
import argparse
import sys

from identresolver.config import default_config_file_path
from identresolver.diagnostics import LoggingSink, NullSink
from identresolver.resolver import create_resolver
from identresolver.resolver_exception import ConfigError


def _get_default_config_content():
    with open(default_config_file_path(), 'rb') as f:
        return f.read().decode('utf8')


def display_default_config_file():
    print(_get_default_config_content())


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog='identresolver-resolve',
        description='Print the S3 location of each image identifier.',
    )
    parser.add_argument('identifiers', nargs='+', metavar='IDENT')
    parser.add_argument('--config', dest='config_file_path', default=None,
                        help='config file (default: the bundled one)')
    parser.add_argument('--log', action='store_true',
                        help='also write a diagnostic log line per identifier')
    return parser.parse_args(argv)


def resolve_identifiers(argv=None, out=None):
    """
    Returns 0 if every identifier resolved, 1 if any didn't and 2 for a bad
    configuration.
    """
    args = _parse_args(argv)
    out = out or sys.stdout
    sink = LoggingSink() if args.log else NullSink()

    try:
        resolver = create_resolver(args.config_file_path, sink=sink)
    except ConfigError as err:
        sys.stderr.write('%s\n' % (err,))
        return 2

    status = 0
    for ident in args.identifiers:
        address = resolver.resolve(ident)
        if address.is_found:
            out.write('%s\t%s\n' % (ident, address.uri))
        else:
            out.write('%s\t%s\n' % (ident, address.bucket))
            status = 1
    return status


def main():
    sys.exit(resolve_identifiers())
