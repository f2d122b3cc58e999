"""
=============================================================================
DISPATCHER
=============================================================================

Chooses the outcome of a parsed request and drives the handler and
emitter that produce it.

=============================================================================
STATE MACHINE
=============================================================================

    ┌─────────┐  classify    ┌───────────────┐  emit   ┌────────────┐  flushed  ┌──────┐
    │  START  │ ───────────► │ METHOD_PARSED │ ──────► │ RESPONDING │ ────────► │ DONE │
    └─────────┘   method     └───────────────┘         └────────────┘           └──────┘

Only the method decides the outcome. Headers, body and protocol version
are never consulted:

    ┌──────────────┬───────────────────────────────────────────────────┐
    │ Method       │ Outcome                                           │
    ├──────────────┼───────────────────────────────────────────────────┤
    │ GET          │ 200 with the file, or 404                         │
    │ HEAD         │ 200 headers only, or 404 headers only             │
    │ POST         │ 405 (nothing here accepts writes)                 │
    │ anything else│ 501                                               │
    └──────────────┴───────────────────────────────────────────────────┘

The method token is classified once into the closed Method enum, and
the transition is a single branch over it. There is no place where a raw
method string is compared against "GET", so adding a method means adding
an enum member and a case.

=============================================================================
"""

import logging
from enum import Enum, auto
from typing import Optional

from .handlers.static import StaticFileHandler
from .http.mime_types import ContentTypePolicy
from .http.request import HTTPRequest
from .http.response import Outcome, ResponseEmitter


logger = logging.getLogger(__name__)


class Method(Enum):
    """Methods the dispatcher distinguishes; OTHER covers every other token."""

    GET = auto()
    HEAD = auto()
    POST = auto()
    OTHER = auto()

    @classmethod
    def from_token(cls, token: str) -> "Method":
        """
        Classify a method token, case-insensitively.

            >>> Method.from_token("head")
            <Method.HEAD: 2>
            >>> Method.from_token("PATCH")
            <Method.OTHER: 4>
        """
        try:
            return cls[token.upper()]
        except KeyError:
            return cls.OTHER


class DispatchState(Enum):
    START = auto()
    METHOD_PARSED = auto()
    RESPONDING = auto()
    DONE = auto()


class Dispatcher:
    """
    Runs one request through the state machine.

    A Dispatcher is cheap and holds no request state beyond the current
    DispatchState, so create one per transaction.

    Usage:
        dispatcher = Dispatcher(StaticFileHandler("/srv/www"))
        outcome = dispatcher.dispatch(request, ResponseEmitter(out))
    """

    def __init__(self, static: StaticFileHandler):
        self.static = static
        self.state = DispatchState.START
        self.method: Optional[Method] = None

    @classmethod
    def for_docroot(
        cls,
        docroot: str,
        content_type: Optional[ContentTypePolicy] = None,
        confine: bool = False,
    ) -> "Dispatcher":
        """Build a dispatcher serving files from `docroot`."""
        return cls(StaticFileHandler(docroot, content_type=content_type, confine=confine))

    def dispatch(self, request: HTTPRequest, emitter: ResponseEmitter) -> Outcome:
        """
        Emit the response for `request` and return its outcome.

        Raises:
            RuntimeError: the dispatcher was already used.
            IOTransferError: from the emitter; state stays RESPONDING.
        """
        if self.state is not DispatchState.START:
            raise RuntimeError(f"dispatcher already used (state {self.state.name})")

        self.method = Method.from_token(request.method)
        self.state = DispatchState.METHOD_PARSED
        logger.debug(f"{request.method} {request.path} classified as {self.method.name}")

        self.state = DispatchState.RESPONDING
        if self.method in (Method.GET, Method.HEAD):
            outcome = self.static.handle(request, emitter)
        elif self.method is Method.POST:
            outcome = emitter.method_not_allowed(request)
        else:
            outcome = emitter.not_implemented(request)

        self.state = DispatchState.DONE
        return outcome
