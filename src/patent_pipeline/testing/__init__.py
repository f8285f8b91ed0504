"""Public testing utilities for the patent pipeline.

Provides in-memory sources and recording collaborators for writing
self-contained examples and tests without network access or a wallet.
"""

from patent_pipeline.testing.fakes import (
    CallbackLedgerRecorder,
    FailingSourceLookup,
    InMemoryLedgerRecorder,
    InMemoryPaymentProcessor,
    InMemorySigner,
    SlowSourceLookup,
    StaticSourceLookup,
)

__all__ = [
    "CallbackLedgerRecorder",
    "FailingSourceLookup",
    "InMemoryLedgerRecorder",
    "InMemoryPaymentProcessor",
    "InMemorySigner",
    "SlowSourceLookup",
    "StaticSourceLookup",
]
