# core/utils/cancellation.py
from typing import List


class OperationCancelled(Exception):
    """Raised when work continues after its owning view was torn down"""


class CancellationToken:
    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OperationCancelled()


class ViewScope:
    """Owns the tokens handed to a view's in-flight operations.

    Closing the scope cancels every token it issued, so results that arrive
    afterwards are dropped instead of applied.
    """

    def __init__(self):
        self._tokens: List[CancellationToken] = []
        self.closed = False

    def token(self) -> CancellationToken:
        token = CancellationToken()
        if self.closed:
            token.cancel()
        self._tokens.append(token)
        return token

    def close(self) -> None:
        self.closed = True
        for token in self._tokens:
            token.cancel()
        self._tokens.clear()

    def __enter__(self) -> "ViewScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
