"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Maps a URL path onto the document root and serves what it finds.

=============================================================================
RESOLVING A PATH
=============================================================================

    docroot   = "/srv/www"
    url path  = "/docs/index.html"

    candidate = docroot + "/" + urlpath
              = "/srv/www//docs/index.html"      (doubled slash is harmless)

    lstat(candidate)
        ├── fails (missing, EACCES, ENOTDIR...)  → exists=False
        ├── not a regular file (dir, fifo...)    → exists=False
        ├── a symlink (lstat does not follow)    → exists=False
        └── regular file                         → exists=True, size=st_size

Nothing is URL-decoded or normalized: "%20" stays "%20" and ".." stays "..".
The raw wire bytes of the path reach the filesystem unchanged.
A missing file is not an error, it is the 404 branch.

=============================================================================
CONTAINMENT (opt-in)
=============================================================================

Raw concatenation means "GET /../../etc/passwd" really looks at
/srv/www//../../etc/passwd. That is how LittleHTTP has always behaved, so
it stays the default. With confine=True the candidate is canonicalized
(realpath: ".." folded, symlinks followed) and must still sit inside the
canonical docroot, otherwise it is reported as not found:

    confine=False   /../secret.txt  →  /srv/secret.txt   (served if regular)
    confine=True    /../secret.txt  →  outside docroot   (404)

=============================================================================
"""

import logging
import os
import stat
from dataclasses import dataclass
from typing import Optional

from ..http.mime_types import ContentTypePolicy, guess_content_type
from ..http.request import HEADER_ENCODING, HTTPRequest
from ..http.response import Outcome, ResponseEmitter


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileInfo:
    """
    What the resolver learned about one candidate path.

    Attributes:
        path:   docroot + "/" + urlpath, unnormalized.
        size:   Byte length; only meaningful when exists is True.
        exists: True only for a regular file (symlinks excluded).
    """

    path: str
    size: int = 0
    exists: bool = False


def build_fspath(docroot: str, urlpath: str) -> str:
    """
    Concatenate docroot and URL path verbatim with one separator.

    The URL path arrives decoded as ISO-8859-1, one character per wire
    byte. It is turned back into those bytes and decoded the way the OS
    decodes file names, so "/caf\\xc3\\xa9.txt" names café.txt on disk.
    """
    return f"{docroot}/{os.fsdecode(urlpath.encode(HEADER_ENCODING))}"


def is_within(root: str, path: str) -> bool:
    """True if canonical `path` is `root` itself or lies below it."""
    try:
        root = os.path.realpath(root)
        path = os.path.realpath(path)
        return os.path.commonpath([root, path]) == root
    except ValueError:
        # embedded NUL, or different drives on Windows
        return False


def resolve(docroot: str, urlpath: str, confine: bool = False) -> FileInfo:
    """
    Look up the file a URL path names.

    Args:
        docroot: Document root directory.
        urlpath: Raw request path.
        confine: Reject paths that canonicalize to outside docroot.

    Returns:
        FileInfo; exists is False for anything but a regular file.
    """
    path = build_fspath(docroot, urlpath)

    if confine and not is_within(docroot, path):
        logger.warning(f"Path traversal attempt: {urlpath}")
        return FileInfo(path=path)

    try:
        st = os.lstat(path)
    except (OSError, ValueError) as e:
        # ValueError: embedded NUL byte
        logger.debug(f"lstat({path}) failed: {e}")
        return FileInfo(path=path)

    if not stat.S_ISREG(st.st_mode):
        return FileInfo(path=path)

    return FileInfo(path=path, size=st.st_size, exists=True)


class StaticFileHandler:
    """
    Serves GET and HEAD requests from a document root.

    =========================================================================
    FLOW
    =========================================================================

        Request: GET /css/site.css

        1. resolve(docroot, "/css/site.css")
        2. regular file?  → 200 with Content-Length and Content-Type
           anything else  → 404 notice

    The Content-Type comes from a pluggable policy (see mime_types).

    =========================================================================
    """

    def __init__(
        self,
        docroot: str,
        content_type: Optional[ContentTypePolicy] = None,
        confine: bool = False,
    ):
        """
        Args:
            docroot: Root directory; validated by the caller.
            content_type: ContentTypePolicy; defaults to the text/plain stub.
            confine: Enable the containment check in resolve().
        """
        self.docroot = docroot
        self.content_type = content_type or guess_content_type
        self.confine = confine

    def resolve(self, urlpath: str) -> FileInfo:
        return resolve(self.docroot, urlpath, confine=self.confine)

    def handle(self, request: HTTPRequest, emitter: ResponseEmitter) -> Outcome:
        """Emit a 200 for a regular file, a 404 for anything else."""
        info = self.resolve(request.path)
        if not info.exists:
            return emitter.not_found(request)

        return emitter.serve_file(request, info, self.content_type(info))
