# -*- encoding: utf-8
"""
`rules` -- Scheme Rules and the Rule Table
==========================================

A scheme rule pairs a pattern, which must match the *whole* identifier, with
a recipe for turning the pattern's captures into an object key. Rules are
collected into a :class:`RuleTable` which is evaluated top to bottom; the
first rule that matches wins.

Numeric schemes store their images in folders built from pairs of digits::

    uva-lib:12345   ->  uva-lib/12/34/5/12345.jp2
    uva-lib:123456  ->  uva-lib/12/34/56/123456.jp2

Each digit length needs its own rule, because a single pattern with optional
groups can't tell which folder a leftover digit belongs in. Use
:func:`digit_rules` to generate the whole family for a scheme.
"""
from logging import getLogger
import re
from string import Formatter

import attr

from identresolver import constants
from identresolver.resolver_exception import RuleDefinitionError


logger = getLogger(__name__)


def group_sizes(count, width=2):
    """
    Split ``count`` digits into groups of ``width``, with any remainder
    forming a shorter final group.

    For example, with the default width 5 becomes ``(2, 2, 1)`` and 6
    becomes ``(2, 2, 2)``.
    """
    if width < 1:
        raise RuleDefinitionError('Group width must be positive, got %r' % width)
    if count < 1:
        raise RuleDefinitionError('Digit count must be positive, got %r' % count)
    sizes = [width] * (count // width)
    if count % width:
        sizes.append(count % width)
    return tuple(sizes)


def _check_filename(instance, attribute, filename):
    try:
        filename.format(digits='0')
    except (KeyError, IndexError, ValueError) as err:
        raise RuleDefinitionError(
            'Bad filename template %r, only {digits} is available: %r' % (filename, err)
        )


@attr.s(slots=True, frozen=True)
class GroupedDigitKey(object):
    """
    Builds ``<folder>/<group1>/<group2>/.../<filename>.<extension>``.

    Every capture is a group of digits and becomes one folder. ``filename``
    is a format string where ``{digits}`` is all of the groups joined back
    together, e.g. ``'shanti-image-{digits}'``.
    """
    folder = attr.ib(converter=lambda folder: folder.strip('/'))
    filename = attr.ib(default='{digits}', validator=_check_filename)
    extension = attr.ib(default=constants.DEFAULT_EXTENSION)

    def check_arity(self, group_count):
        if group_count < 1:
            raise RuleDefinitionError(
                'Grouped digit keys under %r need at least one capture' % self.folder
            )

    def __call__(self, captures):
        digits = ''.join(captures)
        basename = '%s.%s' % (self.filename.format(digits=digits), self.extension)
        return '/'.join([self.folder] + list(captures) + [basename])


def _template_arity(template):
    try:
        fields = [f for (_, f, _, _) in Formatter().parse(template) if f is not None]
    except ValueError as err:
        raise RuleDefinitionError('Bad key template %r: %s' % (template, err))

    indices = set()
    for field in fields:
        if not field.isdigit():
            raise RuleDefinitionError(
                'Key template %r may only use numbered fields such as {0}, got {%s}' %
                (template, field)
            )
        indices.add(int(field))

    if indices != set(range(len(indices))):
        raise RuleDefinitionError(
            'Key template %r must number its fields from {0} without gaps' % template
        )
    return len(indices)


@attr.s(slots=True, frozen=True)
class VerbatimKey(object):
    """
    Uses captures as-is, interpolated into a template by position::

        VerbatimKey('dibs/{0}/{0}-{1}.jp2')
    """
    template = attr.ib(validator=lambda instance, attribute, value: _template_arity(value))

    @property
    def arity(self):
        return _template_arity(self.template)

    def check_arity(self, group_count):
        if group_count != self.arity:
            raise RuleDefinitionError(
                'Key template %r uses %d captures but the pattern has %d' %
                (self.template, self.arity, group_count)
            )

    def __call__(self, captures):
        return self.template.format(*captures)


def _compile(pattern):
    if hasattr(pattern, 'fullmatch'):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as err:
        raise RuleDefinitionError('Bad pattern %r: %s' % (pattern, err))


def _check_bucket(rule, attribute, bucket):
    if bucket not in constants.BUCKET_SELECTORS:
        raise RuleDefinitionError(
            'Rule %r selects unknown bucket %r, expected one of %s' %
            (rule.name, bucket, '/'.join(constants.BUCKET_SELECTORS))
        )


def _check_key_builder(rule, attribute, key_builder):
    if not callable(key_builder):
        raise RuleDefinitionError('Rule %r has no usable key builder' % rule.name)

    check_arity = getattr(key_builder, 'check_arity', None)
    if check_arity is not None:
        try:
            check_arity(rule.pattern.groups)
        except RuleDefinitionError as err:
            raise RuleDefinitionError('Rule %r: %s' % (rule.name, err))


@attr.s(slots=True, frozen=True)
class SchemeRule(object):
    """
    One identifier shape and how to turn it into an object key.

    Attributes:
        name (str): unique name, used in diagnostics.
        pattern (re.Pattern): matched against the entire identifier; a
            string is compiled.
        bucket (str): ``constants.PRIMARY`` or ``constants.SECONDARY``.
        key_builder (callable): takes the tuple of captures, returns the key.
    """
    name = attr.ib()
    pattern = attr.ib(converter=_compile)
    bucket = attr.ib(validator=_check_bucket)
    key_builder = attr.ib(validator=_check_key_builder)

    def match(self, ident):
        """
        Returns the tuple of captures if the pattern matches all of
        ``ident``, otherwise None.
        """
        match = self.pattern.fullmatch(ident)
        if match is None:
            return None
        return match.groups()

    def apply(self, ident):
        """
        Returns the object key for ``ident``, or None if this rule doesn't
        apply to it.
        """
        captures = self.match(ident)
        if captures is None:
            return None

        # An optional or empty group would leave a hole in the key.
        if not all(captures):
            logger.warning(
                'Rule %s matched %r with missing captures %r; ignoring match',
                self.name, ident, captures
            )
            return None

        try:
            return self.key_builder(captures)
        except Exception:
            logger.exception(
                'Rule %s could not build a key for %r from %r; ignoring match',
                self.name, ident, captures
            )
            return None


def digit_rules(name, prefix, key_builder, bucket=constants.PRIMARY,
                min_digits=1, max_digits=None, width=2):
    """
    Generate one exact-length rule per digit count for a numeric scheme.

    Args:
        name (str):
            Scheme name; each rule is called ``<name>/<digit count>``.
        prefix (str):
            Literal text before the digits, e.g. ``'uva-lib:'``.
        key_builder (GroupedDigitKey):
            Key recipe shared by every length.
        bucket (str):
            Bucket selector.
        min_digits, max_digits (int):
            Inclusive range of accepted lengths. ``max_digits`` defaults to
            ``min_digits``.
        width (int):
            Digits per folder.
    Returns:
        list of SchemeRule, longest length first.
    """
    if max_digits is None:
        max_digits = min_digits
    if max_digits < min_digits:
        raise RuleDefinitionError(
            'Scheme %r: max_digits=%r is less than min_digits=%r' %
            (name, max_digits, min_digits)
        )

    rules = []
    for count in range(max_digits, min_digits - 1, -1):
        groups = ''.join('([0-9]{%d})' % size for size in group_sizes(count, width))
        pattern = re.escape(prefix) + groups
        rules.append(SchemeRule('%s/%d' % (name, count), pattern, bucket, key_builder))
    return rules


def verbatim_rule(name, pattern, template, bucket=constants.PRIMARY):
    """A rule whose captures are copied into ``template`` unchanged."""
    return SchemeRule(name, pattern, bucket, VerbatimKey(template))


def _flatten(entries):
    rules = []
    for entry in entries:
        if isinstance(entry, SchemeRule):
            rules.append(entry)
        elif isinstance(entry, (list, tuple)):
            rules.extend(entry)
        else:
            raise RuleDefinitionError('Not a scheme rule: %r' % (entry,))

    if not rules:
        raise RuleDefinitionError('A rule table needs at least one rule')

    seen = set()
    for rule in rules:
        if not isinstance(rule, SchemeRule):
            raise RuleDefinitionError('Not a scheme rule: %r' % (rule,))
        if rule.name in seen:
            raise RuleDefinitionError('Duplicate rule name %r' % rule.name)
        seen.add(rule.name)

    return tuple(rules)


@attr.s(slots=True, frozen=True, repr=False)
class RuleTable(object):
    """
    An immutable, ordered sequence of scheme rules.

    Entries are either rules or lists of rules (as returned by
    :func:`digit_rules`), which are flattened in place. Order is priority:
    when two rules could both match an identifier, the earlier one wins.
    """
    rules = attr.ib(converter=_flatten)

    def __iter__(self):
        return iter(self.rules)

    def __len__(self):
        return len(self.rules)

    def __getitem__(self, index):
        return self.rules[index]

    def __repr__(self):
        return '<RuleTable of %d rules>' % len(self.rules)

    @property
    def names(self):
        return [rule.name for rule in self.rules]

    def first_match(self, ident):
        """
        Returns ``(rule, key)`` for the first rule that applies to ``ident``,
        or ``(None, None)``.
        """
        for rule in self.rules:
            key = rule.apply(ident)
            if key is not None:
                return (rule, key)
        return (None, None)
