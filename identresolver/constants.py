# constants.py
# -*- coding: utf-8 -*-

# Bucket selectors a scheme rule may resolve into.
PRIMARY = 'primary'
SECONDARY = 'secondary'
BUCKET_SELECTORS = (PRIMARY, SECONDARY)

# Keys of the [buckets] config section, per selector.
BUCKET_CONFIG_KEYS = {
    PRIMARY: 'primary_bucket',
    SECONDARY: 'secondary_bucket',
}

# Environment variables the default config interpolates bucket names from.
PRIMARY_BUCKET_ENV = 'IIIF_BUCKET_NAME'
SECONDARY_BUCKET_ENV = 'MANDALA_BUCKET_NAME'

# Returned for both fields of the address when no rule matches.
NOT_FOUND_VALUE = 'none'

DEFAULT_EXTENSION = 'jp2'

DEFAULT_RULE_TABLE = 'identresolver.schemes.DEFAULT_RULE_TABLE'
