# ========================
# file: globe_engine/core/errors.py
# ========================
class GlobeEngineError(Exception):
    """Base error for the globe engine."""


class LoadError(GlobeEngineError):
    """Raised when a climate record document is malformed or incomplete."""


class ConfigurationError(GlobeEngineError):
    """Raised when a color scale, layer or mesh configuration is invalid."""
