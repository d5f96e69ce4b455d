"""Supabase-backed application state repository."""

from dataclasses import dataclass

from supabase import Client

from susu_kitchen.services.store import StateRepository


@dataclass
class SupabaseStateRepository(StateRepository):
    """Stores whole JSON documents in an ``app_state`` key/value table."""

    client: Client
    table: str = "app_state"

    def load(self, key: str) -> list[dict[str, object]] | None:
        """Return the stored document for ``key``, if present."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        if not isinstance(value, list):
            raise RuntimeError(f"Stored state for {key} is not a list")
        return value

    def save(self, key: str, value: list[dict[str, object]]) -> None:
        """Upsert the document for ``key``."""
        response = (
            self.client.table(self.table)
            .upsert({"key": key, "value": value}, on_conflict="key")
            .execute()
        )
        if response.data is None:
            raise RuntimeError(f"Failed to persist state for {key}")
