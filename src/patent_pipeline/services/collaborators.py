"""Abstract external collaborators consumed by the recording stage.

Concrete payment, wallet and ledger clients live outside this package; the
pipeline only needs these three capabilities.  Every method is a coroutine
and may raise -- the recording service converts failures into
:class:`CollaboratorRejection`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from patent_pipeline.domain.values import LedgerReceipt, PaymentReceipt, SignatureResult


class PaymentProcessor(ABC):
    """Charges the recording fee.  Used only as a gate before recording."""

    @abstractmethod
    async def charge(self, amount: str, currency: str) -> PaymentReceipt:
        """Charge *amount* in *currency* and return the receipt."""


class DocumentSigner(ABC):
    """Produces the inventor's signature over a message."""

    @abstractmethod
    async def sign(self, message: str) -> SignatureResult:
        """Sign *message*.  May raise if the user cancels."""


class LedgerRecorder(ABC):
    """Writes a document hash to an append-only ledger."""

    @abstractmethod
    async def record(self, document_hash: str) -> LedgerReceipt:
        """Record *document_hash* and return the transaction receipt."""
