"""Terra Classic chain client: wallet derivation, signing and broadcast."""
from __future__ import annotations

import logging
from typing import Any, List, Protocol, Sequence

from terra_classic_sdk.client.lcd import LCDClient
from terra_classic_sdk.client.lcd.api.tx import CreateTxOptions
from terra_classic_sdk.core import Coins
from terra_classic_sdk.core.broadcast import is_tx_error
from terra_classic_sdk.core.bank import MsgSend
from terra_classic_sdk.core.wasm import MsgExecuteContract
from terra_classic_sdk.key.mnemonic import MnemonicKey

from config import ChainSettings, FeeSettings
from errors import DependencyError, MnemonicError
from messages import ContractTransfer, NativeSend, TransferInstruction
from reconcile import BroadcastOutcome


logger = logging.getLogger(__name__)


class ChainClient(Protocol):
    sender_address: str

    def broadcast(self, instructions: Sequence[TransferInstruction], fee: FeeSettings) -> BroadcastOutcome:
        ...


def to_sdk_msg(instruction: TransferInstruction) -> Any:
    if isinstance(instruction, NativeSend):
        return MsgSend(instruction.sender, instruction.recipient, Coins(instruction.coins))
    if isinstance(instruction, ContractTransfer):
        return MsgExecuteContract(instruction.sender, instruction.contract, instruction.msg)
    raise DependencyError(f"Unsupported transfer instruction: {type(instruction).__name__}")


class TerraChainClient:
    """Signs every instruction into one transaction and broadcasts it through the LCD."""

    def __init__(self, lcd: Any, wallet: Any):
        self.lcd = lcd
        self.wallet = wallet

    @classmethod
    def from_mnemonic(cls, mnemonic: str, chain: ChainSettings) -> "TerraChainClient":
        try:
            key = MnemonicKey(mnemonic=mnemonic)
        except Exception as exc:
            raise MnemonicError(f"Could not derive a key from the mnemonic: {exc}") from exc
        lcd = LCDClient(url=chain.lcd_url, chain_id=chain.chain_id)
        logger.info("Connected wallet %s to %s (%s)", key.acc_address, chain.lcd_url, chain.chain_id)
        return cls(lcd, lcd.wallet(key))

    @property
    def sender_address(self) -> str:
        return self.wallet.key.acc_address

    def broadcast(self, instructions: Sequence[TransferInstruction], fee: FeeSettings) -> BroadcastOutcome:
        msgs: List[Any] = [to_sdk_msg(instruction) for instruction in instructions]
        tx = self.wallet.create_and_sign_tx(
            CreateTxOptions(
                msgs=msgs,
                gas_prices=Coins(fee.gas_prices),
                gas_adjustment=fee.gas_adjustment,
            )
        )
        logger.info("Broadcasting transaction with %d message(s)...", len(msgs))
        result = self.lcd.tx.broadcast(tx)

        if is_tx_error(result):
            raw_log = result.raw_log or f"code {result.code}"
            logger.error("Transaction failed: %s", raw_log)
            return BroadcastOutcome.failed(raw_log)
        logger.info("Transaction succeeded: %s", result.txhash)
        return BroadcastOutcome(success=True, tx_hash=result.txhash)
