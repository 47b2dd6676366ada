# Sitemap generation exceptions module
from .crawl_exceptions import (
    SitemapGenError, UnauthorizedError, OutputDirectoryError, InvalidStartUrlError, RunInProgressError
)

__all__ = [
    'SitemapGenError', 'UnauthorizedError', 'OutputDirectoryError', 'InvalidStartUrlError',
    'RunInProgressError'
]
