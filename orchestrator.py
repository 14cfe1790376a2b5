"""Sequences one batch run: load, build, display, confirm, broadcast, reconcile, save."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence

import config
from errors import BroadcastError, InputFileError, MnemonicError
from messages import MessageBuilder, SummaryEntry, TransferInstruction
from reconcile import BroadcastOutcome, reconcile

if TYPE_CHECKING:
    from chain_client import ChainClient


logger = logging.getLogger(__name__)

MODE_DRY_RUN = "dry_run"
MODE_CANCELLED = "cancelled"
MODE_SENT = "sent"
MODE_FAILED = "failed"
MODE_NOTHING_TO_SEND = "nothing_to_send"


def is_yes(answer: str) -> bool:
    return answer.strip().lower().startswith("y")


@dataclass
class RunResult:
    mode: str
    summary: List[SummaryEntry] = field(default_factory=list)
    instructions: List[TransferInstruction] = field(default_factory=list)
    outcome: Optional[BroadcastOutcome] = None
    log_path: Optional[str] = None


class BatchRun:
    """
    One pass of the batch sender.

    Collaborators are injected so the run can be driven without a terminal or
    a network:
      ask(text) -> str               interactive question/answer channel
      ask_secret(text) -> str        used for the mnemonic, defaults to ask
      client_factory(mnemonic)       returns a ChainClient (sender_address, broadcast())
      load_rows(path)                returns InputRows
      save_log(path, summary, max)   persists the result sheet
      render(summary, max) -> str    table shown before anything irreversible
      show(text)                     console output
    """

    def __init__(
        self,
        *,
        settings: config.Settings,
        ask: Callable[[str], str],
        client_factory: Callable[[str], "ChainClient"],
        load_rows: Callable[[str], Sequence[Any]],
        save_log: Callable[..., str],
        render: Callable[..., str],
        show: Callable[[str], None] = print,
        ask_secret: Optional[Callable[[str], str]] = None,
    ):
        self.settings = settings
        self.ask = ask
        self.ask_secret = ask_secret or ask
        self.client_factory = client_factory
        self.load_rows = load_rows
        self.save_log = save_log
        self.render = render
        self.show = show
        self.builder = MessageBuilder(settings.transfer)
        self.max_amount = settings.transfer.max_amount_decimal

    def _read_mnemonic(self) -> str:
        mnemonic = " ".join((self.ask_secret("Enter your mnemonic phrase: ") or "").split())
        minimum = self.settings.wallet.min_mnemonic_words
        if not mnemonic or len(mnemonic.split(" ")) < minimum:
            raise MnemonicError(f"Invalid or missing mnemonic (expected at least {minimum} words).")
        return mnemonic

    def _read_file_path(self, preset: Optional[str]) -> str:
        path = (preset or self.ask("Enter file path (CSV or Excel): ") or "").strip()
        if not path:
            raise InputFileError("No input file given.")
        if not Path(path).is_file():
            raise InputFileError(f"File not found: {path}")
        return path

    def _persist(self, summary: Sequence[SummaryEntry], dry_run: bool) -> str:
        path = self.settings.output.path_for(dry_run)
        return self.save_log(path, summary, self.max_amount)

    def execute(
        self,
        *,
        file_path: Optional[str] = None,
        dry_run: Optional[bool] = None,
        assume_yes: bool = False,
    ) -> RunResult:
        """Run the pipeline; the keyword arguments pre-answer the matching prompts."""
        self.show("Welcome to the Terra Classic Batch Sender")
        mnemonic = self._read_mnemonic()
        client = self.client_factory(mnemonic)

        file_path = self._read_file_path(file_path)
        if dry_run is None:
            dry_run = is_yes(self.ask("Dry run only? (yes/no): ") or "")
        rows = self.load_rows(file_path)

        built = self.builder.build(rows, client.sender_address)
        self.show(self.render(built.summary, self.max_amount))

        if dry_run:
            log_path = self._persist(built.summary, dry_run=True)
            self.show("Dry run complete. No transactions sent.")
            return RunResult(MODE_DRY_RUN, built.summary, built.instructions, log_path=log_path)

        if built.instructions:
            answer = "yes" if assume_yes else self.ask(f"\nSend {len(built.instructions)} valid transactions? (yes/no): ") or ""
            if not is_yes(answer):
                self.show("Cancelled by user.")
                logger.info("Run cancelled before broadcast.")
                return RunResult(MODE_CANCELLED, built.summary, built.instructions)
        else:
            logger.warning("No valid rows to send; writing the result log without broadcasting.")
            log_path = self._persist(built.summary, dry_run=False)
            return RunResult(MODE_NOTHING_TO_SEND, built.summary, built.instructions, log_path=log_path)

        return self._broadcast(client, built.summary, built.instructions)

    def _persist_failure(self, summary: Sequence[SummaryEntry], reason: str) -> str:
        return self._persist(reconcile(summary, BroadcastOutcome.failed(reason)), dry_run=False)

    def _broadcast(
        self, client: "ChainClient", summary: List[SummaryEntry], instructions: List[TransferInstruction]
    ) -> RunResult:
        self.show("Broadcasting...")
        try:
            outcome = client.broadcast(instructions, self.settings.fees)
        except KeyboardInterrupt:
            log_path = self._persist_failure(summary, "Interrupted during broadcast")
            logger.warning("Broadcast interrupted; results saved to %s", log_path)
            raise
        except Exception as exc:
            logger.error("Error broadcasting: %s", exc)
            log_path = self._persist_failure(summary, str(exc))
            raise BroadcastError(f"Error broadcasting: {exc} (results saved to {log_path})") from exc

        final = reconcile(summary, outcome)
        if outcome.success:
            self.show(f"TX Success! Hash: {outcome.tx_hash}")
        else:
            self.show(f"TX failed: {outcome.raw_log}")
        log_path = self._persist(final, dry_run=False)
        mode = MODE_SENT if outcome.success else MODE_FAILED
        return RunResult(mode, final, instructions, outcome=outcome, log_path=log_path)
