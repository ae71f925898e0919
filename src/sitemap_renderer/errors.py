"""Domain-specific exceptions."""


class SitemapRendererError(Exception):
    """Base class for all sitemap renderer errors."""


class SitemapError(SitemapRendererError):
    """Sitemap could not be fetched or is not a urlset/sitemapindex document."""


class RenderError(SitemapRendererError):
    """Headless browser failed to load or extract a single page."""


class NoContentError(SitemapRendererError):
    """No page produced any content, so there is nothing to write."""
