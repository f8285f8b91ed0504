"""Payment-gated ledger recording of an assembled patent document.

The recording stage runs three collaborator calls in order:

1. charge the recording fee (skipped when a receipt from an earlier attempt
   is supplied),
2. have the inventor sign the document hash,
3. write the hash to the ledger.

Any failure surfaces as :class:`CollaboratorRejection` naming the failing
collaborator.  When the payment succeeded before a later step failed, the
exception carries the receipt so the caller can retry without paying twice.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from collections.abc import Awaitable
from datetime import datetime, timezone
from typing import TypeVar

from patent_pipeline.domain.entities import PatentDocument
from patent_pipeline.domain.exceptions import CollaboratorRejection
from patent_pipeline.domain.values import BlockchainRecord, PaymentReceipt
from patent_pipeline.infrastructure.config import RecordingConfig
from patent_pipeline.services.collaborators import (
    DocumentSigner,
    LedgerRecorder,
    PaymentProcessor,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compute_document_hash(document: PatentDocument) -> str:
    """SHA-256 over the canonical JSON of the document's recorded fields."""
    payload = {
        "id": document.document_id,
        "title": document.idea.title,
        "inventor": document.idea.submitter_name,
        "abstract": document.abstract,
        "claims": list(document.claims),
        "created_at": document.created_at.isoformat(),
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return "0x" + hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class BlockchainRecorder:
    """Orchestrates payment, signing and ledger recording for one document.

    Parameters
    ----------
    payment:
        Charges the recording fee.
    signer:
        Signs the document hash.
    ledger:
        Records the document hash.
    config:
        Fee, currency, per-call timeout and explorer URL template.
    """

    def __init__(
        self,
        payment: PaymentProcessor,
        signer: DocumentSigner,
        ledger: LedgerRecorder,
        config: RecordingConfig | None = None,
    ) -> None:
        self._payment = payment
        self._signer = signer
        self._ledger = ledger
        self._config = config or RecordingConfig()

    @property
    def config(self) -> RecordingConfig:
        return self._config

    def explorer_url(self, tx_hash: str) -> str:
        return self._config.explorer_url.format(tx_hash=tx_hash)

    async def _guarded(
        self,
        collaborator: str,
        call: Awaitable[T],
        payment: PaymentReceipt | None,
    ) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._config.collaborator_timeout)
        except asyncio.TimeoutError:
            raise CollaboratorRejection(
                f"{collaborator} timed out after {self._config.collaborator_timeout:g}s",
                collaborator=collaborator,
                payment=payment,
            ) from None
        except CollaboratorRejection:
            raise
        except Exception as exc:
            raise CollaboratorRejection(
                f"{collaborator} rejected: {exc}",
                collaborator=collaborator,
                payment=payment,
            ) from exc

    async def pay(self) -> PaymentReceipt:
        cfg = self._config
        receipt = await self._guarded(
            "payment", self._payment.charge(cfg.fee, cfg.currency), None
        )
        logger.info(
            "Recording fee charged: %s %s (%s)", cfg.fee, cfg.currency, receipt.transaction_ref
        )
        return receipt

    async def record(
        self,
        document: PatentDocument,
        payment: PaymentReceipt | None = None,
    ) -> tuple[PaymentReceipt, BlockchainRecord]:
        """Pay (unless *payment* is given), sign and record *document*.

        Returns
        -------
        tuple[PaymentReceipt, BlockchainRecord]
            The receipt used and the recording metadata.

        Raises
        ------
        CollaboratorRejection
            If any collaborator fails or times out.
        """
        if payment is None:
            payment = await self.pay()
        else:
            logger.debug("Reusing payment %s for %s", payment.transaction_ref, document.document_id)

        document_hash = compute_document_hash(document)
        signature = await self._guarded("signer", self._signer.sign(document_hash), payment)
        receipt = await self._guarded("ledger", self._ledger.record(document_hash), payment)

        record = BlockchainRecord(
            patent_id=document.document_id,
            document_hash=document_hash,
            transaction_hash=receipt.tx_hash,
            block_number=receipt.block_number,
            signature=signature.signature,
            gas_used=receipt.gas_used,
            fee=payment.amount or self._config.fee,
            currency=payment.currency or self._config.currency,
            payment_ref=payment.transaction_ref,
            recorded_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Recorded %s in block %d (%s)",
            document.document_id,
            record.block_number,
            record.transaction_hash,
        )
        return payment, record
