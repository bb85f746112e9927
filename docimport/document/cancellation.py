import threading


class CancelToken:
    """Cancellation flag for one document branch.

    A child token reports cancelled when it or any ancestor is cancelled.
    Cancelling a child leaves its parent and siblings untouched.
    """

    def __init__(self, parent: "CancelToken | None" = None) -> None:
        self._event = threading.Event()
        self._parent = parent

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        token: CancelToken | None = self
        while token is not None:
            if token._event.is_set():
                return True
            token = token._parent
        return False

    def child(self) -> "CancelToken":
        return CancelToken(parent=self)
