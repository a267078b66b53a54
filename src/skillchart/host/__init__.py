"""Host capabilities (document store, file index, chart renderer, notifier).

The Google and Slack implementations are imported from their own modules so
the protocols can be used without the client libraries being configured.
"""

from .base import (
    ChartRenderer,
    CreateOutcome,
    DocumentStore,
    FileIndex,
    Notifier,
    StoredFile,
)

__all__ = [
    "ChartRenderer",
    "CreateOutcome",
    "DocumentStore",
    "FileIndex",
    "Notifier",
    "StoredFile",
]
