class BrailleError(Exception):
    """Base class for errors raised by brailletone."""


class ConfigurationError(BrailleError, ValueError):
    """A transformer was constructed with out-of-range parameters."""


class TransformError(BrailleError):
    """An image could not be rescaled or sampled."""
