"""Tests for the credential gate."""

import json

import pytest

from src.services.credentials import (
    CREDENTIAL_KEY_NAME,
    CredentialStore,
    EnvironmentKeyHost,
    HostDelegatedGate,
    StoredSecretGate,
    build_credential_gate,
)
from src.services.errors import ValidationFailure


class FakeHost:
    def __init__(self, selected=False, key=None):
        self.selected = selected
        self.key = key
        self.opened = 0

    def has_selected_key(self):
        return self.selected

    def open_key_selector(self):
        self.opened += 1

    def get_api_key(self):
        return self.key


class TestCredentialStore:
    def test_missing_file_is_empty(self, tmp_path):
        store = CredentialStore(tmp_path / "creds.json")
        assert store.get(CREDENTIAL_KEY_NAME) is None

    def test_set_get_delete(self, tmp_path):
        path = tmp_path / "nested" / "creds.json"
        store = CredentialStore(path)
        store.set(CREDENTIAL_KEY_NAME, "AIza-test")

        assert store.get(CREDENTIAL_KEY_NAME) == "AIza-test"
        assert json.loads(path.read_text())[CREDENTIAL_KEY_NAME] == "AIza-test"

        store.delete(CREDENTIAL_KEY_NAME)
        assert store.get(CREDENTIAL_KEY_NAME) is None

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "creds.json"
        path.write_text("{not json")
        assert CredentialStore(path).get(CREDENTIAL_KEY_NAME) is None


class TestStoredSecretGate:
    @pytest.fixture
    def store(self, tmp_path):
        return CredentialStore(tmp_path / "creds.json")

    def test_not_ready_without_key(self, store):
        gate = StoredSecretGate(store)
        assert not gate.ready
        assert gate.needs_input
        assert gate.get_api_key() is None

    def test_reads_existing_key_on_construction(self, store):
        store.set(CREDENTIAL_KEY_NAME, "AIza-existing")
        gate = StoredSecretGate(store)
        assert gate.ready
        assert gate.get_api_key() == "AIza-existing"

    def test_save_key_trims_and_persists(self, store):
        notified = []
        gate = StoredSecretGate(store, on_ready=lambda: notified.append(True))

        gate.save_key("  AIza-new  ")

        assert gate.ready
        assert gate.get_api_key() == "AIza-new"
        assert store.get(CREDENTIAL_KEY_NAME) == "AIza-new"
        assert notified == [True]

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_blank_key_rejected(self, store, value):
        gate = StoredSecretGate(store)
        with pytest.raises(ValidationFailure) as exc_info:
            gate.save_key(value)
        assert exc_info.value.user_message == "API 키를 입력해주세요."
        assert not gate.ready
        assert store.get(CREDENTIAL_KEY_NAME) is None

    def test_clear_key(self, store):
        gate = StoredSecretGate(store)
        gate.save_key("AIza-new")
        gate.clear_key()
        assert not gate.ready
        assert gate.needs_input
        assert store.get(CREDENTIAL_KEY_NAME) is None

    def test_reselection_keeps_key_but_shows_input(self, store):
        gate = StoredSecretGate(store)
        gate.save_key("AIza-new")
        gate.request_reselection()
        assert gate.needs_input
        assert gate.get_api_key() == "AIza-new"

    def test_masked_key_hides_secret(self, store):
        gate = StoredSecretGate(store)
        assert gate.masked_key() == ""
        gate.save_key("AIza-secret")
        assert "AIza" not in gate.masked_key()


class TestHostDelegatedGate:
    def test_ready_reflects_host(self):
        assert HostDelegatedGate(FakeHost(selected=True)).ready
        assert not HostDelegatedGate(FakeHost(selected=False)).ready

    def test_selector_is_optimistic(self):
        host = FakeHost(selected=False)
        notified = []
        gate = HostDelegatedGate(host, on_ready=lambda: notified.append(True))

        gate.open_key_selector()

        # The host never reports the outcome; the key is assumed selected
        assert gate.ready
        assert host.opened == 1
        assert notified == [True]

    def test_reselection_reopens_selector(self):
        host = FakeHost(selected=True)
        gate = HostDelegatedGate(host)
        gate.request_reselection()
        assert host.opened == 1

    def test_key_comes_from_host(self):
        gate = HostDelegatedGate(FakeHost(selected=True, key="AIza-host"))
        assert gate.get_api_key() == "AIza-host"


class TestEnvironmentKeyHost:
    def test_reads_google_api_key(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "AIza-env")
        host = EnvironmentKeyHost()
        assert host.has_selected_key()
        assert host.get_api_key() == "AIza-env"

    def test_no_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        assert not EnvironmentKeyHost().has_selected_key()


class TestBuildCredentialGate:
    def test_stored_mode(self, tmp_path):
        from src.config import Config

        cfg = Config(credential_mode="stored", credential_store_path=tmp_path / "c.json")
        assert isinstance(build_credential_gate(cfg), StoredSecretGate)

    def test_host_mode(self):
        from src.config import Config

        cfg = Config(credential_mode="host")
        gate = build_credential_gate(cfg, host=FakeHost(selected=True))
        assert isinstance(gate, HostDelegatedGate)
        assert gate.ready
