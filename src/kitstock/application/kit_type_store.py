"""Kit type store.

The seeded default kit types are referenced by fallback logic everywhere
and can be neither archived nor deleted.
"""

from __future__ import annotations

from kitstock.application.catalog_store import CatalogStore
from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.kit_type import KitType, is_default_kit_type
from kitstock.domain.repository.asset_repository import KitTypeRepository


class KitTypeStore(CatalogStore[KitType]):

    entity_name = "kit type"

    def __init__(self, repo: KitTypeRepository) -> None:
        super().__init__(repo)

    def _before_archive(self, record_id: str) -> None:
        if is_default_kit_type(record_id):
            raise ValidationError("Default kit types cannot be archived")

    def _before_delete(self, record_id: str) -> None:
        if is_default_kit_type(record_id):
            raise ValidationError("Default kit types cannot be deleted")
