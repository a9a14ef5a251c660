"""
Exception classes for Scenarist.

All Scenarist exceptions inherit from ScenaristError,
making it easy to catch all library errors.

Classification itself never raises: unmatched lines fall back to
``action`` and malformed persistence data is rejected with a ``False``
return value. Exceptions are reserved for programmer errors
(bad configuration) and I/O failures the caller asked for explicitly.

Example:
    >>> try:
    ...     config = scenarist.ScoringConfig(needs_review_threshold=150)
    ... except scenarist.ConfigurationError as e:
    ...     print(f"Bad config: {e}")
"""


class ScenaristError(Exception):
    """
    Base exception for all Scenarist errors.

    Catch this to handle any Scenarist-specific error.
    """

    pass


class ConfigurationError(ScenaristError, ValueError):
    """
    Raised for invalid configuration.

    Subclasses ValueError so callers validating plain values keep working.

    Example:
        >>> EngineConfig(strategy="viterbi")
        ConfigurationError: strategy must be one of ('cascade', 'scoring')
    """

    pass


class PersistenceError(ScenaristError):
    """
    Raised when a memory or correction snapshot cannot be written.

    Reading is lenient (returns False on bad data); writing is not,
    since a silent write failure would lose the user's corrections.
    """

    pass
