"""Exception types shared across the pipeline."""


class ConclexError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(ConclexError):
    """Configuration file could not be read or has the wrong shape."""


class ResourceError(ConclexError):
    """A declared input resource is missing or malformed. Stops the run."""

    def __init__(self, resource: str, message: str):
        self.resource = resource
        super().__init__(f"Resource '{resource}': {message}")


class AnalysisError(ConclexError):
    """A single analysis step failed. The pipeline continues with the next one."""


class DegenerateModelError(AnalysisError):
    """Model input has no rows, a single level, or a constant predictor."""
