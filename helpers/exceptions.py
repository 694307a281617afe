# helpers/exceptions.py
# --------------------------------------------------
# Errors raised while building or serving sitemaps.
# --------------------------------------------------


class SitemapError(Exception):
    """Base class for every sitemap failure."""


class SitemapConfigError(SitemapError, TypeError):
    """Wrong URL source / base URL, or a URL source that returned a non-list."""


class SitemapValidationError(SitemapError, ValueError):
    """A URL descriptor is missing a required field or has the wrong shape."""
