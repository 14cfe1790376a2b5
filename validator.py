"""Row validation for batch transfer sheets."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Any, Mapping, Optional, Union

from config import TransferSettings


logger = logging.getLogger(__name__)


class TokenKind(str, Enum):
    NATIVE = "native"
    CW20 = "cw20"


class RejectReason(str, Enum):
    INVALID_ENTRY = "invalid_entry"
    AMOUNT_TOO_LARGE = "amount_too_large"
    INVALID_NATIVE_TOKEN = "invalid_native_token"
    INVALID_CW20_CONTRACT = "invalid_cw20_contract"
    UNKNOWN_TYPE = "unknown_type"


@dataclass(frozen=True)
class InputRow:
    """One raw record from the input sheet. Nothing is guaranteed about its fields."""

    address: Any = None
    amount: Any = None
    type: Any = None
    token: Any = None

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "InputRow":
        return cls(
            address=record.get("address"),
            amount=record.get("amount"),
            type=record.get("type"),
            token=record.get("token"),
        )


@dataclass(frozen=True)
class ValidatedOperation:
    recipient: str
    amount_major: Decimal
    amount_minor: int
    kind: TokenKind
    token_ref: str


@dataclass(frozen=True)
class RejectedRow:
    recipient: str
    reason: RejectReason
    type_as_entered: str


ValidationResult = Union[ValidatedOperation, RejectedRow]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_amount(value: Any) -> Optional[Decimal]:
    """Parse an amount cell into a finite Decimal, or None when it is not a number."""
    raw = _text(value)
    if not raw:
        return None
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def to_minor_units(amount: Decimal, micro_scale: int) -> int:
    """Scale a major amount into integer base units, rounding half away from zero.

    The product is computed with enough precision to be exact, so the only
    rounding step is the final quantize.
    """
    scale = Decimal(micro_scale)
    _, digits, exponent = amount.as_tuple()
    with localcontext() as ctx:
        ctx.prec = len(digits) + max(exponent, 0) + len(scale.as_tuple().digits) + 2
        scaled = amount * scale
        return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class RowValidator:
    """Turns one InputRow into a ValidatedOperation or a RejectedRow.

    Rules run in a fixed order and the first failing one decides the reason:
    the combined well-formedness guard, the amount ceiling, then the
    type-specific token check.
    """

    def __init__(self, transfer_settings: TransferSettings):
        self.settings = transfer_settings
        self.max_amount = transfer_settings.max_amount_decimal
        self.native_denoms = {symbol.upper(): denom for symbol, denom in transfer_settings.native_denoms.items()}

    def validate(self, row: InputRow) -> ValidationResult:
        recipient = _text(row.address)
        amount = _parse_amount(row.amount)
        token_type = _text(row.type).lower()
        token = _text(row.token)

        if not recipient or amount is None or amount <= 0 or not token_type or not token:
            return self._reject(recipient, RejectReason.INVALID_ENTRY, token_type)

        if amount > self.max_amount:
            return self._reject(recipient, RejectReason.AMOUNT_TOO_LARGE, token_type)

        amount_minor = to_minor_units(amount, self.settings.micro_scale)

        if token_type == TokenKind.NATIVE.value:
            denom = self.native_denoms.get(token.upper())
            if denom is None:
                return self._reject(recipient, RejectReason.INVALID_NATIVE_TOKEN, token_type)
            return ValidatedOperation(recipient, amount, amount_minor, TokenKind.NATIVE, denom)

        if token_type == TokenKind.CW20.value:
            if not token.startswith(self.settings.cw20_prefix):
                return self._reject(recipient, RejectReason.INVALID_CW20_CONTRACT, token_type)
            return ValidatedOperation(recipient, amount, amount_minor, TokenKind.CW20, token)

        return self._reject(recipient, RejectReason.UNKNOWN_TYPE, token_type)

    @staticmethod
    def _reject(recipient: str, reason: RejectReason, token_type: str) -> RejectedRow:
        logger.debug("Rejected row for %r: %s", recipient, reason.value)
        return RejectedRow(recipient=recipient, reason=reason, type_as_entered=token_type)


def validate_row(row: InputRow, transfer_settings: TransferSettings) -> ValidationResult:
    return RowValidator(transfer_settings).validate(row)
