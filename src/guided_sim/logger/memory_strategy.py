from .log_storage_strategy import LogStorageStrategy


class MemoryStrategy(LogStorageStrategy):
    """
    Keeps log entries in a list. Used by tests and by hosts that forward
    session logs to their own sink.
    """

    def __init__(self, max_entries=10000):
        self.max_entries = max_entries
        self.entries = []

    def store_log(self, message, priority, timestamp):
        self.entries.append((timestamp, priority, message))
        if len(self.entries) > self.max_entries:
            del self.entries[0]

    def flush_logs(self):
        self.entries.clear()

    def messages(self, priority=None):
        """Return logged messages, optionally only those of one priority name."""
        return [m for (_, p, m) in self.entries if priority is None or p == priority]
