"""Builds transfer instructions and the per-row audit summary from sheet rows."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from config import TransferSettings
from validator import InputRow, RejectedRow, RejectReason, RowValidator, TokenKind, ValidatedOperation


logger = logging.getLogger(__name__)


class EntryStatus(str, Enum):
    READY = "ready"
    SENT = "sent"
    FAILED = "failed"
    INVALID_ENTRY = RejectReason.INVALID_ENTRY.value
    AMOUNT_TOO_LARGE = RejectReason.AMOUNT_TOO_LARGE.value
    INVALID_NATIVE_TOKEN = RejectReason.INVALID_NATIVE_TOKEN.value
    INVALID_CW20_CONTRACT = RejectReason.INVALID_CW20_CONTRACT.value
    UNKNOWN_TYPE = RejectReason.UNKNOWN_TYPE.value

    @classmethod
    def for_reason(cls, reason: RejectReason) -> "EntryStatus":
        return cls(reason.value)


@dataclass(frozen=True)
class NativeSend:
    sender: str
    recipient: str
    coins: Dict[str, str]


@dataclass(frozen=True)
class ContractTransfer:
    sender: str
    contract: str
    msg: Dict[str, Any]


TransferInstruction = Union[NativeSend, ContractTransfer]


@dataclass(frozen=True)
class SummaryEntry:
    recipient: str
    type: str
    status: EntryStatus
    amount: Optional[Decimal] = None
    denom: Optional[str] = None
    contract: Optional[str] = None
    tx_hash: Optional[str] = None

    @property
    def token_ref(self) -> str:
        return self.denom or self.contract or ""


@dataclass
class BuildResult:
    instructions: List[TransferInstruction] = field(default_factory=list)
    summary: List[SummaryEntry] = field(default_factory=list)

    @property
    def ready_count(self) -> int:
        return sum(1 for entry in self.summary if entry.status is EntryStatus.READY)


def build_instruction(operation: ValidatedOperation, sender_address: str) -> TransferInstruction:
    amount = str(operation.amount_minor)
    if operation.kind is TokenKind.NATIVE:
        return NativeSend(sender=sender_address, recipient=operation.recipient, coins={operation.token_ref: amount})
    return ContractTransfer(
        sender=sender_address,
        contract=operation.token_ref,
        msg={"transfer": {"recipient": operation.recipient, "amount": amount}},
    )


def _ready_entry(operation: ValidatedOperation) -> SummaryEntry:
    is_native = operation.kind is TokenKind.NATIVE
    return SummaryEntry(
        recipient=operation.recipient,
        type=operation.kind.value,
        status=EntryStatus.READY,
        amount=operation.amount_major,
        denom=operation.token_ref if is_native else None,
        contract=None if is_native else operation.token_ref,
    )


class MessageBuilder:
    def __init__(self, transfer_settings: TransferSettings):
        self.validator = RowValidator(transfer_settings)

    def build(self, rows: Iterable[InputRow], sender_address: str) -> BuildResult:
        """Validate every row in order; valid rows yield exactly one instruction each."""
        result = BuildResult()
        for row in rows:
            outcome = self.validator.validate(row)
            if isinstance(outcome, RejectedRow):
                result.summary.append(
                    SummaryEntry(
                        recipient=outcome.recipient,
                        type=outcome.type_as_entered,
                        status=EntryStatus.for_reason(outcome.reason),
                    )
                )
                continue
            result.instructions.append(build_instruction(outcome, sender_address))
            result.summary.append(_ready_entry(outcome))

        logger.info(
            "Built %d transfer message(s) from %d row(s); %d rejected.",
            len(result.instructions),
            len(result.summary),
            len(result.summary) - len(result.instructions),
        )
        return result


def build_messages(rows: Iterable[InputRow], sender_address: str, transfer_settings: TransferSettings) -> BuildResult:
    return MessageBuilder(transfer_settings).build(rows, sender_address)
