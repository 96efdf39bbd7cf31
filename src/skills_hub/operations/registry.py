"""In-memory provider collection with the single-current invariant.

For every app type at most one provider is current, and exactly one whenever
the type has any providers at all after add or delete.
"""

from skills_hub.errors import NotFoundError
from skills_hub.models.app_type import AppType
from skills_hub.models.provider import ProviderBackupEntry, ProviderRecord


class ProviderRegistry:
    """Provider records and per-type backup history.

    Wraps the given list and dict and mutates them in place, so a registry
    built over a StateDraft edits that draft.
    """

    def __init__(
        self,
        providers: list[ProviderRecord],
        backups: dict[AppType, list[ProviderBackupEntry]],
    ) -> None:
        self._providers = providers
        self._backups = backups

    def list_providers(self, app_type: AppType | None = None) -> list[ProviderRecord]:
        if app_type is None:
            return list(self._providers)
        return [provider for provider in self._providers if provider.app_type == app_type]

    def get(self, provider_id: str) -> ProviderRecord:
        for provider in self._providers:
            if provider.id == provider_id:
                return provider
        raise NotFoundError(f"Provider not found: {provider_id}")

    def find(self, app_type: AppType, provider_id: str) -> ProviderRecord | None:
        for provider in self._providers:
            if provider.app_type == app_type and provider.id == provider_id:
                return provider
        return None

    def current(self, app_type: AppType) -> ProviderRecord | None:
        for provider in self._providers:
            if provider.app_type == app_type and provider.is_current:
                return provider
        return None

    def find_by_universal_id(self, app_type: AppType, universal_id: str) -> ProviderRecord | None:
        for provider in self._providers:
            if provider.app_type == app_type and provider.universal_id == universal_id:
                return provider
        return None

    def add(self, record: ProviderRecord) -> ProviderRecord:
        """Append a record; it becomes current iff its type has no current yet."""
        stored = record.model_copy(update={"is_current": self.current(record.app_type) is None})
        self._providers.append(stored)
        return stored

    def insert(self, record: ProviderRecord) -> ProviderRecord:
        """Append a record as given. Callers keep the invariant themselves."""
        self._providers.append(record)
        return record

    def replace(self, record: ProviderRecord) -> None:
        for index, provider in enumerate(self._providers):
            if provider.id == record.id:
                self._providers[index] = record
                return
        raise NotFoundError(f"Provider not found: {record.id}")

    def delete(self, provider_id: str, now: int) -> ProviderRecord:
        """Remove a provider, promoting another of its type if none is current.

        The first remaining provider of the type (in registry order) is
        promoted; there is no other tie-break.
        """
        removed = self.get(provider_id)
        self._providers.remove(removed)

        if self.current(removed.app_type) is None:
            for index, provider in enumerate(self._providers):
                if provider.app_type == removed.app_type:
                    self._providers[index] = provider.model_copy(
                        update={"is_current": True, "updated_at": now}
                    )
                    break

        return removed

    def set_current(self, app_type: AppType, provider_id: str, now: int) -> None:
        """Make provider_id the only current provider of app_type.

        Every provider of the type gets ``updated_at`` stamped.
        """
        for index, provider in enumerate(self._providers):
            if provider.app_type != app_type:
                continue
            self._providers[index] = provider.model_copy(
                update={"is_current": provider.id == provider_id, "updated_at": now}
            )

    def clear_current(self, app_type: AppType, now: int) -> None:
        for index, provider in enumerate(self._providers):
            if provider.app_type == app_type and provider.is_current:
                self._providers[index] = provider.model_copy(
                    update={"is_current": False, "updated_at": now}
                )

    def push_backup(self, app_type: AppType, entry: ProviderBackupEntry) -> None:
        self._backups.setdefault(app_type, []).append(entry)

    def latest_backup(self, app_type: AppType) -> ProviderBackupEntry | None:
        """Peek at the newest backup without removing it."""
        entries = self._backups.get(app_type)
        if not entries:
            return None
        return entries[-1]

    def backups(self, app_type: AppType) -> list[ProviderBackupEntry]:
        return list(self._backups.get(app_type, []))
