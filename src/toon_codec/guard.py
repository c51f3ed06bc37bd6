"""Depth and cycle tracking for a single encode or decode traversal."""

from collections.abc import Iterator
from contextlib import contextmanager

from .errors import CircularReferenceError, DepthExceededError


class TraversalGuard:
    """
    Track container nesting during one traversal.

    ``depth`` counts the containers currently open, so the root container
    sits at depth 1 once entered. With ``track_identity`` the guard also
    remembers which containers are open, by ``id()`` rather than by content.
    A guard belongs to exactly one encode/decode call.
    """

    def __init__(self, max_depth: int, track_identity: bool = True):
        self.max_depth = max_depth
        self.depth = 0
        self._open: set[int] | None = set() if track_identity else None

    @contextmanager
    def enter(self, container: object = None, line_number: int | None = None) -> Iterator[None]:
        """
        Open a container for the duration of the ``with`` block.

        Raises:
            CircularReferenceError: If ``container`` is already open.
            DepthExceededError: If ``max_depth`` containers are already open.
        """
        ident = None
        if self._open is not None and container is not None:
            ident = id(container)
            if ident in self._open:
                raise CircularReferenceError(
                    f"Circular reference to {type(container).__name__} detected"
                )

        if self.depth >= self.max_depth:
            raise DepthExceededError(self.max_depth, line_number)

        if ident is not None:
            self._open.add(ident)
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1
            if ident is not None:
                self._open.discard(ident)
