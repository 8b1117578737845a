# -*- coding: utf-8 -*-
'''
s3source.py
===========
Fetches source images from S3 once their storage address is known.

AWS S3 credentials may be supplied to Boto in various ways on the host
system. They are not referenced explicitly in this code.

The config dictionary (the ``[s3]`` section) MUST contain
 * `cache_root`, the absolute path to the directory where source images
   should be downloaded.
'''
from logging import getLogger
import os
import tempfile

import boto3
import botocore.exceptions

from identresolver.resolver_exception import ConfigError, ResolverException


logger = getLogger(__name__)


class S3Source(object):

    def __init__(self, config):
        self.config = config
        if not config or not config.get('cache_root'):
            message = 'Server Side Error: Configuration incomplete. Missing setting for cache_root.'
            logger.error(message)
            raise ConfigError(message)
        self.cache_root = config['cache_root']

    def raise_404_for_address(self, address):
        message = 'Image not found at %s.' % (address.uri,)
        logger.warning(message)
        raise ResolverException(message)

    def cache_file_path(self, address):
        return os.path.join(self.cache_root, address.bucket, *address.key.split('/'))

    def is_resolvable(self, address):
        '''does this object even exist?'''
        if not address.is_found:
            return False
        if os.path.exists(self.cache_file_path(address)):
            return True

        s3 = boto3.resource('s3')
        try:
            logger.debug('Checking existence of Bucket = %s   Key = %s', address.bucket, address.key)
            s3.Object(address.bucket, address.key).load()
        except botocore.exceptions.ClientError as e:
            code = e.response.get('Error', {}).get('Code')
            if code in ('404', 'NoSuchKey', 'NoSuchBucket'):
                logger.debug('Check for %s returned %s', address.uri, code)
                return False
            raise
        return True

    def fetch(self, address):
        '''
        Download the object at ``address`` unless it is already cached.

        Returns:
            str: path to the local copy.
        Raises:
            ResolverException for the not-found address or a missing object.
        '''
        if not address.is_found:
            self.raise_404_for_address(address)

        local_fp = self.cache_file_path(address)
        if os.path.exists(local_fp):
            logger.debug('returning src image from local disk: %s', local_fp)
            return local_fp

        cache_dir = os.path.dirname(local_fp)
        os.makedirs(cache_dir, exist_ok=True)

        logger.debug('Getting img from AWS S3. bucketname, key: %s, %s', address.bucket, address.key)
        s3_client = boto3.client('s3')
        with tempfile.NamedTemporaryFile(dir=cache_dir, delete=False) as tmp_file:
            tmp_fp = tmp_file.name
        try:
            s3_client.download_file(address.bucket, address.key, tmp_fp)
            # Another process may have fetched the same object in the meantime;
            # os.replace is atomic so readers never see a partial file.
            os.replace(tmp_fp, local_fp)
        except botocore.exceptions.ClientError as e:
            logger.warning('Download of %s failed: %s', address.uri, e)
            raise ResolverException('Source image not found at %s.' % (address.uri,))
        finally:
            if os.path.exists(tmp_fp):
                os.unlink(tmp_fp)
        logger.info('Copied %s to %s', address.uri, local_fp)
        return local_fp
