"""tasklist: an ordered, persisted task list with drag-style reordering."""

from tasklist.config import VERSION

__version__ = VERSION
