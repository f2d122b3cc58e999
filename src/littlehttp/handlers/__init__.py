"""
=============================================================================
HANDLERS MODULE
=============================================================================

Request handlers that produce a response body from somewhere.

There is exactly one: StaticFileHandler, which maps the request path
onto a file under the document root. The dispatcher hands it every GET
and HEAD request.

    from littlehttp.handlers import StaticFileHandler

    handler = StaticFileHandler("/srv/www", confine=True)
    handler.resolve("/index.html")   # FileInfo(path=..., size=1362, exists=True)

=============================================================================
"""

from .static import FileInfo, StaticFileHandler, build_fspath, resolve

__all__ = [
    "FileInfo",
    "StaticFileHandler",
    "build_fspath",
    "resolve",
]
