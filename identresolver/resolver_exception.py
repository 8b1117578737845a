# -*- encoding: utf-8 -*-


class IdentResolverException(Exception):
    """Base exception class for all errors raised by identresolver."""
    pass


class ResolverException(IdentResolverException):
    pass


class ConfigError(IdentResolverException):
    """Raised for errors in the user config."""
    pass


class RuleDefinitionError(ConfigError):
    """Raised when a scheme rule or rule table cannot be built."""
    pass
