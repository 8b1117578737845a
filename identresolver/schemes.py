# -*- encoding: utf-8
"""
The identifier schemes served from the IIIF and Mandala buckets.

Most common schemes come first. Within a numeric scheme every digit length
has its own rule, so ordering only matters between schemes whose prefixes
could overlap.
"""
from identresolver.constants import PRIMARY, SECONDARY
from identresolver.rules import (
    GroupedDigitKey,
    RuleTable,
    digit_rules,
    verbatim_rule,
)


DEFAULT_RULE_TABLE = RuleTable([
    #
    # most common
    #
    digit_rules('uva-lib', 'uva-lib:', GroupedDigitKey('uva-lib'),
                PRIMARY, min_digits=5, max_digits=7),

    digit_rules('shanti-image', 'shanti-image-',
                GroupedDigitKey('mandala-assets', filename='shanti-image-{digits}'),
                SECONDARY, min_digits=3, max_digits=8),

    verbatim_rule('dibs', r'dibs:([A-Z0-9]+)-([0-9]{3})', 'dibs/{0}/{0}-{1}.jp2'),

    #
    # less common
    #
    digit_rules('tsm', 'tsm:', GroupedDigitKey('tsm'), PRIMARY, min_digits=7),

    digit_rules('jag:mlr', 'jag:mlr:', GroupedDigitKey('law/jag/mlr'),
                PRIMARY, min_digits=6),

    digit_rules('law:archives', 'law:archives:c', GroupedDigitKey('law/archives'),
                PRIMARY, min_digits=4, max_digits=7),

    digit_rules('law:pwct', 'law:pwct:', GroupedDigitKey('law/pwct'),
                PRIMARY, min_digits=2, max_digits=6),

    digit_rules('law:mrcs', 'law:mrcs:', GroupedDigitKey('law/mrcs'),
                PRIMARY, min_digits=2, max_digits=6),

    # the whole identifier is the file name
    verbatim_rule('law:archives:rg32-400', r'(law:archives:rg32-400:[A-Za-z0-9_.-]+)',
                  'law/archives/rg32-400/{0}.jp2'),

    digit_rules('law:lile', 'law:lile:', GroupedDigitKey('law/lile'),
                PRIMARY, min_digits=3),

    digit_rules('static', 'static:', GroupedDigitKey('static'), PRIMARY, min_digits=1),
])
