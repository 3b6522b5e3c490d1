"""
Exception taxonomy for the quality-gate pipeline.

Generation errors are retryable inside the attempt budget; persistence errors
are translated by the repositories so callers can tell a degraded store
(``SchemaUnavailableError``) from a broken one.
"""


class ContentGateError(Exception):
    """Base class for all pipeline errors."""
    pass


class GenerationError(ContentGateError):
    """
    The generator failed to produce a usable candidate.

    ``usage`` carries tokens spent on the failed call when the provider
    answered; ``log_id`` is set once the failure has been audited.
    """

    def __init__(self, message: str, usage=None):
        super().__init__(message)
        self.usage = usage
        self.log_id = None


class TransientGenerationError(GenerationError):
    """Provider outage or transport failure."""
    pass


class GeneratorTimeoutError(TransientGenerationError):
    """The provider call exceeded the per-attempt timeout."""
    pass


class MalformedOutputError(GenerationError):
    """Generator output could not be turned into a candidate, even by the fallback parser."""
    pass


class PersistenceError(ContentGateError):
    """A storage read or write failed."""
    pass


class SchemaUnavailableError(PersistenceError):
    """The backing table is missing or not yet migrated."""
    pass


class SafetyConfigLoadError(ContentGateError):
    """Brand safety configuration could not be loaded and no fallback applies."""
    pass
