"""
Provider registry and active-provider selection.

Each upstream vendor lives in a registry slot ("primary", "fallback",
"secondary"). Every slot carries a brand-neutral display name; the vendor's
real identity only exists in the endpoint URL and model id, which never leave
the process.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from .config import Settings
from .errors import ProviderNotConfiguredError

logger = logging.getLogger(__name__)


DISPLAY_NAME = "CroweCode™ Intelligence"
MODEL_INFO = "CroweCode Neural Architecture v4.0"


@dataclass(frozen=True)
class Provider:
    """Connection configuration for one upstream vendor."""
    key: str
    name: str  # shown to users, always brand-neutral
    endpoint: str
    model: str
    api_key: str = field(repr=False)


@dataclass(frozen=True)
class ProviderSlot:
    """A known vendor slot and the settings fields that feed it."""
    key: str
    name: str
    credential_field: str
    endpoint_field: str
    model_field: str


PROVIDER_SLOTS: tuple[ProviderSlot, ...] = (
    ProviderSlot(
        key="primary",
        name="CroweCode Neural Engine",
        credential_field="xai_api_key",
        endpoint_field="primary_endpoint",
        model_field="primary_model",
    ),
    ProviderSlot(
        key="fallback",
        name="CroweCode Backup Engine",
        credential_field="anthropic_api_key",
        endpoint_field="fallback_endpoint",
        model_field="fallback_model",
    ),
    ProviderSlot(
        key="secondary",
        name="CroweCode Alternative Engine",
        credential_field="openai_api_key",
        endpoint_field="secondary_endpoint",
        model_field="secondary_model",
    ),
)


class ProviderRegistry:
    """
    Mapping of slot key -> Provider plus the active selection.

    Registration never fails: a slot without a credential is skipped and
    remembered in `skipped`. Switching to an unknown key is a no-op, counted
    in `ignored_switches` so operators can spot misconfiguration.

    The active key is read and written under a lock. Callers should read the
    active provider once per request and use that object throughout.
    """

    def __init__(self, active_key: str = "primary"):
        self._providers: dict[str, Provider] = {}
        self._active_key = active_key
        self._lock = threading.Lock()
        self.skipped: list[str] = []
        self.ignored_switches: int = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderRegistry":
        """Build a registry from the configured vendor slots."""
        registry = cls(active_key=settings.active_provider)
        registry.register_from_settings(settings)
        return registry

    def register(self, key: str, provider: Provider) -> None:
        """Insert or replace the provider for `key`."""
        with self._lock:
            self._providers[key] = provider
            if key in self.skipped:
                self.skipped.remove(key)

    def register_from_settings(self, settings: Settings) -> None:
        for slot in PROVIDER_SLOTS:
            api_key = getattr(settings, slot.credential_field)
            if not api_key:
                logger.info("Provider slot '%s' has no credential, skipping", slot.key)
                if slot.key not in self.skipped:
                    self.skipped.append(slot.key)
                continue

            self.register(
                slot.key,
                Provider(
                    key=slot.key,
                    name=slot.name,
                    endpoint=getattr(settings, slot.endpoint_field),
                    model=getattr(settings, slot.model_field),
                    api_key=api_key,
                ),
            )
            logger.info("Provider slot '%s' registered", slot.key)

        if self.get_active() is None:
            logger.warning("Active provider '%s' is not configured", self.active_key)

    @property
    def active_key(self) -> str:
        with self._lock:
            return self._active_key

    def get(self, key: str) -> Optional[Provider]:
        with self._lock:
            return self._providers.get(key)

    def get_active(self) -> Optional[Provider]:
        """Return the provider bound to the active key, or None."""
        with self._lock:
            return self._providers.get(self._active_key)

    def require_active(self) -> Provider:
        """Like get_active, but raises ProviderNotConfiguredError if unresolved."""
        provider = self.get_active()
        if provider is None:
            raise ProviderNotConfiguredError(
                f"Active provider '{self.active_key}' is not registered "
                f"({len(self)} provider(s) configured)"
            )
        return provider

    def switch_active(self, key: str) -> bool:
        """
        Make `key` the active provider if it is registered.

        Returns True if the selection now points at `key`, False if the
        request was ignored. The selection is left untouched when ignored.
        """
        with self._lock:
            if key not in self._providers:
                self.ignored_switches += 1
                logger.warning("Ignoring switch to unregistered provider '%s'", key)
                return False
            self._active_key = key

        logger.info("Active provider switched to '%s'", key)
        return True

    def has_any(self) -> bool:
        with self._lock:
            return len(self._providers) > 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._providers

    def display_name(self) -> str:
        return DISPLAY_NAME

    def model_info(self) -> str:
        return MODEL_INFO

    def status(self) -> dict:
        """
        Diagnostics for operators.

        Only slot keys and brand display names are reported; credentials,
        endpoints and vendor model ids stay inside the process.
        """
        with self._lock:
            active = self._providers.get(self._active_key)
            return {
                "active": self._active_key,
                "active_configured": active is not None,
                "providers": [
                    {"key": p.key, "name": p.name}
                    for p in self._providers.values()
                ],
                "skipped": list(self.skipped),
                "ignored_switches": self.ignored_switches,
            }
