import threading


class KeyRotator:
    """Round-robin pool of upstream API keys.

    Every call to `next()` hands out the key at the cursor and moves the cursor on.
    Keys are never excluded, a key that just failed comes back in its turn.
    """

    def __init__(self, keys: list[str]) -> None:
        self._keys = [key for key in keys if key and key.strip()]
        self._cursor = 0
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        return len(self._keys)

    def next(self) -> str | None:
        """Return the next key, or None if no keys are configured."""
        if not self._keys:
            return None
        with self._lock:
            key = self._keys[self._cursor]
            self._cursor = (self._cursor + 1) % len(self._keys)
        return key
