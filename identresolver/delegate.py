# -*- coding: utf-8 -*-
"""
`delegate` -- Per-request hooks for the image server
====================================================

The image server creates one delegate per request, sets ``context`` to a
dict describing the request, and then calls the hook methods it needs. Only
``s3source_object_info()`` does any work here; the other hooks are the
pass-through defaults.

Instances don't need to be thread-safe. The Resolver they share is.
"""
from identresolver.resolver import NOT_FOUND


class CustomDelegate(object):

    def __init__(self, resolver, context=None):
        self.resolver = resolver
        self.context = context if context is not None else {}

    def s3source_object_info(self, options=None):
        """
        Returns:
            dict with ``bucket`` and ``key``; both are ``'none'`` when the
            identifier is unknown.
        """
        ident = self.context.get('identifier')
        if ident is None:
            return NOT_FOUND.to_dict()
        return self.resolver.resolve(ident).to_dict()

    def pre_authorize(self, options=None):
        return True

    def authorize(self, options=None):
        return True

    def extra_iiif2_information_response_keys(self, options=None):
        return {}

    def extra_iiif3_information_response_keys(self, options=None):
        return {}

    def overlay(self, options=None):
        return None

    def redactions(self, options=None):
        return []

    def metadata(self, options=None):
        return None
