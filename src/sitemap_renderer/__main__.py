"""Allow ``python -m sitemap_renderer``."""

from .main import main

main()
