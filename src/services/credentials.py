"""Credential gate for the Gemini API key.

Two interchangeable modes:

- Stored-secret mode: the user pastes a key, it is kept in a small local
  key-value store (a JSON file) and reused on the next launch.
- Host-delegated mode: the hosting environment owns the key (for a local
  install that is the process environment / .env file).

Both expose ``ready`` and ``get_api_key()``. ``ready`` is a UI hint only;
services raise ``CredentialMissing`` on their own when no key is usable.
"""

import json
import logging
import os
from pathlib import Path
from typing import Callable, Optional, Protocol

from src.config import Config, config as default_config, reload_environment
from src.services.errors import ValidationFailure

logger = logging.getLogger(__name__)

# Name of the single entry in the credential store
CREDENTIAL_KEY_NAME = "GEMINI_API_KEY"


class CredentialStore:
    """Named-entry key-value store persisted as JSON."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Credential store unreadable, treating as empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            pass

    def get(self, name: str) -> Optional[str]:
        value = self._read().get(name)
        return value if isinstance(value, str) and value else None

    def set(self, name: str, value: str) -> None:
        data = self._read()
        data[name] = value
        self._write(data)

    def delete(self, name: str) -> None:
        data = self._read()
        if name in data:
            del data[name]
            self._write(data)


class KeyHost(Protocol):
    """Host-provided key selection capability."""

    def has_selected_key(self) -> bool:
        ...

    def open_key_selector(self) -> None:
        ...

    def get_api_key(self) -> Optional[str]:
        ...


class EnvironmentKeyHost:
    """Key host backed by the process environment and the .env file.

    Opening the selector re-reads .env, so a user can edit the file and
    pick the key up without restarting the app.
    """

    def __init__(self, dotenv_path: Optional[Path] = None):
        self.dotenv_path = dotenv_path

    def has_selected_key(self) -> bool:
        return bool(self.get_api_key())

    def open_key_selector(self) -> None:
        reload_environment(self.dotenv_path)

    def get_api_key(self) -> Optional[str]:
        return os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY") or None


class StoredSecretGate:
    """Stored-secret mode: the user pastes a key into a masked field."""

    mode = "stored"

    def __init__(
        self,
        store: CredentialStore,
        on_ready: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self.on_ready = on_ready
        self._api_key = store.get(CREDENTIAL_KEY_NAME)
        self.needs_input = self._api_key is None

    @property
    def ready(self) -> bool:
        return bool(self._api_key)

    def get_api_key(self) -> Optional[str]:
        return self._api_key

    def save_key(self, value: str) -> None:
        """Trim, validate and persist a key.

        Raises:
            ValidationFailure: if the trimmed key is empty
        """
        key = (value or "").strip()
        if not key:
            raise ValidationFailure()

        self.store.set(CREDENTIAL_KEY_NAME, key)
        self._api_key = key
        self.needs_input = False
        logger.info("API key saved to credential store")

        if self.on_ready:
            self.on_ready()

    def clear_key(self) -> None:
        self.store.delete(CREDENTIAL_KEY_NAME)
        self._api_key = None
        self.needs_input = True

    def request_reselection(self) -> None:
        """Show the key input again after the API rejected the key."""
        self.needs_input = True

    def masked_key(self) -> str:
        if not self._api_key:
            return ""
        return "*" * 24


class HostDelegatedGate:
    """Host-delegated mode.

    The host's selector does not report whether the user actually picked a
    key, so after it returns the key is assumed selected. A wrong guess
    surfaces later as CredentialMissing / CredentialInvalid from the API call.
    """

    mode = "host"

    def __init__(
        self,
        host: KeyHost,
        on_ready: Optional[Callable[[], None]] = None,
    ):
        self.host = host
        self.on_ready = on_ready
        self._selected = host.has_selected_key()
        self.needs_input = not self._selected

    @property
    def ready(self) -> bool:
        return self._selected

    def get_api_key(self) -> Optional[str]:
        return self.host.get_api_key()

    def open_key_selector(self) -> None:
        self.host.open_key_selector()
        # Optimistic: the host flow returns no success/failure payload
        self._selected = True
        self.needs_input = False
        if self.on_ready:
            self.on_ready()

    def request_reselection(self) -> None:
        self.needs_input = True
        self.open_key_selector()


def build_credential_gate(
    config: Optional[Config] = None,
    host: Optional[KeyHost] = None,
    on_ready: Optional[Callable[[], None]] = None,
):
    """Create the gate selected by CREDENTIAL_MODE."""
    cfg = config or default_config
    if cfg.credential_mode == "host":
        return HostDelegatedGate(host or EnvironmentKeyHost(), on_ready=on_ready)
    return StoredSecretGate(CredentialStore(cfg.credential_store_path), on_ready=on_ready)
