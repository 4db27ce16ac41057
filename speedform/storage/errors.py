"""Error types for storage module."""


class StorageFailure(RuntimeError):
    """Raised when a call to the data store is rejected or times out.

    In-memory state may diverge from the remote copy after this error;
    callers reconcile by re-querying.
    """

    def __init__(
        self,
        operation: str,
        collection: str,
        detail: str,
        status_code: int | None = None,
    ):
        self.operation = operation
        self.collection = collection
        self.detail = detail
        self.status_code = status_code
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"{operation} on '{collection}' failed{status}: {detail}")
