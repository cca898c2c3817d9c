"""Abstract repositories for namesets, badges, teams and kit types."""

from __future__ import annotations

from kitstock.domain.model.badge import Badge
from kitstock.domain.model.kit_type import KitType
from kitstock.domain.model.nameset import Nameset
from kitstock.domain.model.team import Team
from kitstock.domain.repository.catalog_repository import CatalogRepository


class NamesetRepository(CatalogRepository[Nameset]):
    pass


class BadgeRepository(CatalogRepository[Badge]):
    pass


class TeamRepository(CatalogRepository[Team]):
    pass


class KitTypeRepository(CatalogRepository[KitType]):
    pass
