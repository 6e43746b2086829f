import os
import threading
from datetime import datetime
from enum import Enum

from .local_file_strategy import LocalFileStrategy


class Logger:
    """
    Process-wide logger for guided simulation sessions.
    Implements a static class pattern; storage is delegated to a
    LogStorageStrategy. Nothing is written until a strategy is set.
    """

    class LogPriority(Enum):
        DEBUG = 1
        INFO = 2
        WARNING = 3
        ERROR = 4
        CRITICAL = 5

    is_logging_enabled = True
    minimum_priority = LogPriority.DEBUG
    log_storage_strategy = None
    _log_lock = threading.RLock()
    _strategy_lock = threading.Lock()
    _initialize_lock = threading.Lock()

    # INITIALIZE LOGGER
    @classmethod
    def initialize(cls, file_location=None):
        """
        Installs the default file storage strategy if none is set.

        Args:
            file_location (str): Optional path. Defaults to
                $GUIDED_SIM_LOG_PATH or /tmp/guided_sim_logs.txt.
        """
        with cls._initialize_lock:
            if cls.log_storage_strategy is None:
                default_path = "/tmp/guided_sim_logs.txt"
                file_location = file_location or os.getenv("GUIDED_SIM_LOG_PATH", default_path)
                cls.set_log_storage_strategy(LocalFileStrategy(file_location))
                cls.log(f"Logger initialized with file storage at {file_location}.", cls.LogPriority.INFO)

    # LOG WITH MESSAGE AND PRIORITY
    @classmethod
    def log(cls, message, priority=LogPriority.DEBUG):
        """
        Logs a message with a given priority through the storage strategy.

        Parameters:
        message (str): The log message to be stored.
        priority (LogPriority): The priority level of the log (default is DEBUG).
        """
        with cls._log_lock:
            if not cls.is_logging_enabled or cls.log_storage_strategy is None:
                return
            if priority.value < cls.minimum_priority.value:
                return
            cls.log_storage_strategy.store_log(
                message, priority.name, datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            )

    @classmethod
    def set_log_storage_strategy(cls, log_storage_strategy):
        with cls._strategy_lock:
            cls.log_storage_strategy = log_storage_strategy

    @classmethod
    def set_minimum_priority(cls, priority):
        cls.minimum_priority = priority

    @classmethod
    def flush_logs(cls):
        with cls._log_lock:
            if cls.is_logging_enabled and cls.log_storage_strategy:
                cls.log_storage_strategy.flush_logs()

    @classmethod
    def disable_logging(cls):
        cls.log("Logging disabled", cls.LogPriority.INFO)
        cls.is_logging_enabled = False

    @classmethod
    def enable_logging(cls):
        cls.is_logging_enabled = True
        cls.log("Logging enabled", cls.LogPriority.INFO)

    @classmethod
    def reset(cls):
        """Drop the storage strategy and restore defaults."""
        with cls._strategy_lock:
            cls.log_storage_strategy = None
        cls.is_logging_enabled = True
        cls.minimum_priority = cls.LogPriority.DEBUG
