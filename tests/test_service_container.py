import config
import sheets
from app.container import ServiceContainer
from orchestrator import BatchRun

from conftest import SENDER


def test_container_uses_settings_env():
    container = ServiceContainer.build()
    assert container.settings is config.settings
    assert container.collaborators["load_rows"] is sheets.load_rows
    assert container.collaborators["save_log"] is sheets.save_log
    assert container.collaborators["render"] is sheets.render_summary
    assert container.collaborators["ask"] is input


def test_secret_prompt_defaults_to_ask():
    ask = lambda question: "answer"
    container = ServiceContainer.build(overrides={"ask": ask})
    assert container.collaborators["ask_secret"] is ask


def test_client_factory_override_is_used():
    class StubClient:
        sender_address = SENDER

        def broadcast(self, instructions, fee):
            raise AssertionError("not expected")

    factory = lambda mnemonic: StubClient()
    container = ServiceContainer.build(overrides={"client_factory": factory})
    assert container.collaborators["client_factory"] is factory
    assert container.build_run().client_factory is factory


def test_build_run_wires_settings(test_settings):
    container = ServiceContainer.build(settings=test_settings, overrides={"ask": lambda q: ""})
    run = container.build_run()
    assert isinstance(run, BatchRun)
    assert run.settings is test_settings
    assert run.load_rows is sheets.load_rows
