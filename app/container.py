"""Dependency wiring helpers for the batch sender."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import config
import sheets
from chain_client import ChainClient, TerraChainClient
from orchestrator import BatchRun


def _default_client_factory(settings: config.Settings) -> Callable[[str], ChainClient]:
    def factory(mnemonic: str) -> ChainClient:
        return TerraChainClient.from_mnemonic(mnemonic, settings.chain)

    return factory


@dataclass
class ServiceContainer:
    """Simple dependency container to ease testing and wiring."""

    settings: config.Settings
    collaborators: Dict[str, Any]

    @classmethod
    def build(
        cls,
        *,
        settings: Optional[config.Settings] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ServiceContainer":
        resolved_settings = settings or config.settings
        override_map = overrides or {}

        ask = override_map.get("ask") or input
        collaborators = {
            "ask": ask,
            "ask_secret": override_map.get("ask_secret") or ask,
            "client_factory": override_map.get("client_factory") or _default_client_factory(resolved_settings),
            "load_rows": override_map.get("load_rows") or sheets.load_rows,
            "save_log": override_map.get("save_log") or sheets.save_log,
            "render": override_map.get("render") or sheets.render_summary,
            "show": override_map.get("show") or print,
        }

        return cls(settings=resolved_settings, collaborators=collaborators)

    def build_run(self) -> BatchRun:
        return BatchRun(settings=self.settings, **self.collaborators)
