# -*- encoding: utf-8 -*-

import pytest

from identresolver.delegate import CustomDelegate
from identresolver.resolver import Resolver


@pytest.fixture
def resolver(buckets, sink):
    return Resolver(buckets, sink=sink)


class TestCustomDelegate(object):

    def test_object_info_for_known_identifier(self, resolver):
        delegate = CustomDelegate(resolver, {'identifier': 'uva-lib:123456'})
        assert delegate.s3source_object_info() == {
            'bucket': 'iiif-bucket', 'key': 'uva-lib/12/34/56/123456.jp2'
        }

    def test_object_info_for_unknown_identifier(self, resolver, sink):
        delegate = CustomDelegate(resolver, {'identifier': 'unknown-scheme:xyz'})
        assert delegate.s3source_object_info() == {'bucket': 'none', 'key': 'none'}
        assert not sink.events[0].matched

    def test_context_without_identifier(self, resolver, sink):
        delegate = CustomDelegate(resolver)
        assert delegate.s3source_object_info() == {'bucket': 'none', 'key': 'none'}
        assert sink.events == []

    def test_context_can_be_set_later(self, resolver):
        delegate = CustomDelegate(resolver)
        delegate.context = {'identifier': 'static:7'}
        assert delegate.s3source_object_info()['key'] == 'static/7/7.jp2'

    def test_policy_hooks_are_pass_through(self, resolver):
        delegate = CustomDelegate(resolver, {'identifier': 'static:7'})
        assert delegate.pre_authorize() is True
        assert delegate.authorize() is True
        assert delegate.redactions() == []
        assert delegate.extra_iiif2_information_response_keys() == {}
        assert delegate.extra_iiif3_information_response_keys() == {}
        assert delegate.overlay() is None
        assert delegate.metadata() is None
