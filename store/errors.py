"""Store-level errors."""


class StoreConnectionFailure(Exception):
    """The persistence store could not be opened."""

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"Could not connect to store {target}: {reason}")
