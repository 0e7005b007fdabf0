"""
Configuration settings for the search tool indexer.

Every setting below is a default; an environment variable with the same
name overrides it at runtime (see IndexCfg).
"""
import os

# Consumer pool settings
NUMBER_OF_THREADS = 4  # indexer threads draining the document stack
POP_BATCH_SIZE = 1000  # documents taken off the stack per pop
PROGRESS_LOG_START = 10000  # first progress log, doubles afterwards

# Document stack settings
STACK_MAX = 100000  # advisory cap, gatherers pause above it (-1 disables)
STACK_BACKOFF_START = 1.0  # seconds, first wait on an empty stack
STACK_BACKOFF_CEILING = 16.0  # seconds, longest wait on an empty stack

# Index writer settings
MERGE_FACTOR = 10  # segments allowed before they are merged
MAX_BUFFERED_DOCS = 50000  # documents buffered before a segment is flushed
USE_COMPOUND_DOCS = True  # store segments as compound files

# Database settings
MGD_DB_PATH = "mgd.db"

# Logging
LOG_FILE = "indexer.log"

DEFAULTS = {
    'NUMBER_OF_THREADS': NUMBER_OF_THREADS,
    'POP_BATCH_SIZE': POP_BATCH_SIZE,
    'PROGRESS_LOG_START': PROGRESS_LOG_START,
    'STACK_MAX': STACK_MAX,
    'STACK_BACKOFF_START': STACK_BACKOFF_START,
    'STACK_BACKOFF_CEILING': STACK_BACKOFF_CEILING,
    'MERGE_FACTOR': MERGE_FACTOR,
    'MAX_BUFFERED_DOCS': MAX_BUFFERED_DOCS,
    'USE_COMPOUND_DOCS': USE_COMPOUND_DOCS,
    'MGD_DB_PATH': MGD_DB_PATH,
    'LOG_FILE': LOG_FILE,
}

_TRUE_VALUES = ('true', 'yes', '1', 'on')
_FALSE_VALUES = ('false', 'no', '0', 'off')


class ConfigError(Exception):
    """Raised when a configuration item is missing or malformed."""


class IndexCfg:
    """
    Configuration for one indexing run.

    Values are looked up in ``overrides`` first, then in the environment,
    then in the module defaults.
    """

    def __init__(self, overrides=None, environ=None):
        self.overrides = dict(overrides or {})
        self.environ = os.environ if environ is None else environ

    def get(self, name):
        """Return the raw string value of a configuration item."""
        if name in self.overrides:
            return str(self.overrides[name])
        if name in self.environ:
            return self.environ[name]
        if name in DEFAULTS:
            return str(DEFAULTS[name])
        raise ConfigError(f"Unknown configuration item: {name}")

    def get_int(self, name):
        value = self.get(name)
        try:
            return int(value)
        except ValueError:
            raise ConfigError(f"{name} must be an integer, got {value!r}")

    def get_float(self, name):
        value = self.get(name)
        try:
            return float(value)
        except ValueError:
            raise ConfigError(f"{name} must be a number, got {value!r}")

    def get_bool(self, name):
        value = self.get(name).strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ConfigError(f"{name} must be a boolean, got {value!r}")
