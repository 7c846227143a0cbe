"""Catalog repository: owns the single process-wide product catalog snapshot."""

import json
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from salestrainer.core.logging import get_logger
from salestrainer.models.setting import AppSetting

logger = get_logger(__name__)

PRODUCTS_KEY = "products_json"


class CatalogRepository:
    """
    Holds the most recently uploaded catalog.

    The `settings` table row is the durable copy; `products.json` in the data
    directory is a mirror that also seeds an empty database. The in-memory
    snapshot is refreshed on every write. Sessions never reference the
    catalog after creation, so replacing it invalidates nothing else.
    """

    def __init__(self, seed_path: Path, sample_size: int = 12):
        self.seed_path = seed_path
        self.sample_size = sample_size
        self._snapshot: list[Any] | None = None

    async def load(self, db: AsyncSession) -> list[Any] | None:
        """Return the current catalog, or None if nothing was uploaded yet."""
        if self._snapshot is not None:
            return list(self._snapshot)

        row = await db.get(AppSetting, PRODUCTS_KEY)
        if row is not None:
            self._snapshot = self._decode(row.value, source="database")
        elif self.seed_path.exists():
            self._snapshot = self._decode(
                self.seed_path.read_text(encoding="utf-8"), source=str(self.seed_path)
            )

        return list(self._snapshot) if self._snapshot is not None else None

    async def replace(self, db: AsyncSession, products: list[Any]) -> int:
        """Persist a new snapshot and make it current. Returns the item count."""
        serialized = json.dumps(products, ensure_ascii=False)

        await db.merge(AppSetting(key=PRODUCTS_KEY, value=serialized))
        await db.commit()
        self._snapshot = list(products)

        try:
            self.seed_path.parent.mkdir(parents=True, exist_ok=True)
            self.seed_path.write_text(serialized, encoding="utf-8")
        except OSError as exc:
            logger.warning("catalog.mirror_failed", path=str(self.seed_path), error=str(exc))

        logger.info("catalog.replaced", count=len(products))
        return len(products)

    def sample(self, products: list[Any]) -> list[Any]:
        """Fixed prefix of the catalog used to ground scenario generation."""
        return list(products[: self.sample_size])

    @staticmethod
    def _decode(raw: str, source: str) -> list[Any] | None:
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("catalog.unreadable", source=source)
            return None
        if not isinstance(parsed, list):
            logger.warning("catalog.not_a_list", source=source)
            return None
        return parsed
