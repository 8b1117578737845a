#-*- coding: utf-8 -*-

import io

import pytest

from identresolver import user_commands


ENV = {'IIIF_BUCKET_NAME': 'iiif-prod', 'MANDALA_BUCKET_NAME': 'mandala-prod'}


@pytest.fixture
def environ(monkeypatch):
    for key, value in ENV.items():
        monkeypatch.setenv(key, value)


class TestResolveIdentifiers(object):

    def test_prints_addresses(self, environ, reset_logger):
        out = io.StringIO()
        status = user_commands.resolve_identifiers(
            ['uva-lib:12345', 'shanti-image-1234'], out=out
        )
        assert status == 0
        assert out.getvalue().splitlines() == [
            'uva-lib:12345\ts3://iiif-prod/uva-lib/12/34/5/12345.jp2',
            'shanti-image-1234\ts3://mandala-prod/mandala-assets/12/34/shanti-image-1234.jp2',
        ]

    def test_unresolved_identifier_sets_status(self, environ, reset_logger):
        out = io.StringIO()
        status = user_commands.resolve_identifiers(['static:7', 'nope:1'], out=out)
        assert status == 1
        assert out.getvalue().splitlines()[1] == 'nope:1\tnone'

    def test_bad_config_is_status_2(self, monkeypatch, capsys, reset_logger):
        monkeypatch.delenv('IIIF_BUCKET_NAME', raising=False)
        monkeypatch.delenv('MANDALA_BUCKET_NAME', raising=False)
        status = user_commands.resolve_identifiers(['static:7'], out=io.StringIO())
        assert status == 2
        assert 'buckets' in capsys.readouterr().err

    def test_needs_an_identifier(self):
        with pytest.raises(SystemExit):
            user_commands.resolve_identifiers([])


def test_display_default_config_file(capsys):
    user_commands.display_default_config_file()
    assert "primary_bucket = '${IIIF_BUCKET_NAME}'" in capsys.readouterr().out
