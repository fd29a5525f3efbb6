# sitemap_helpers/errors.py
# -----------------------------------------------------
# Error kinds raised by the sitemap pipeline.
# Every failure is terminal for the run; nothing retries.
# -----------------------------------------------------


class SitemapError(Exception):
    """Base class for every sitemap generation failure."""


class ConfigurationError(SitemapError):
    """Configuration is absent, incomplete or invalid."""


class DiscoveryError(SitemapError):
    """Pages directory or route manifest could not be read."""


class WriteError(SitemapError):
    """The sink failed to write, append or finalize the output file."""


class SitemapStateError(WriteError):
    """Writer used out of order (e.g. body after close)."""
