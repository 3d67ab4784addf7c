"""Append-only audit trail."""

import json
from typing import Any

from order_engine.state import keys
from order_engine.state.manager import StateManager
from order_engine.utils.clock import utc_now
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)


class AuditLog:
    """Records who-did-what entries on a Redis list that is never rewritten."""

    def __init__(self, state_manager: StateManager):
        self.state = state_manager

    async def log(
        self,
        action: str,
        entity_type: str,
        entity_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        entry = {
            "action": action,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "details": details or {},
            "recorded_at": utc_now().isoformat(),
        }
        await self.state.append(keys.AUDIT_LOG, json.dumps(entry, default=str))
        logger.debug("audit_recorded", action=action, entity_id=entity_id)

    async def entries(self, entity_id: str | None = None) -> list[dict[str, Any]]:
        """Read the trail, oldest first, optionally for one entity."""
        records = [json.loads(raw) for raw in await self.state.list_range(keys.AUDIT_LOG)]
        if entity_id is None:
            return records
        return [r for r in records if r["entity_id"] == entity_id]
