"""Team store."""

from __future__ import annotations

from kitstock.application.catalog_store import CatalogStore
from kitstock.domain.model.team import Team
from kitstock.domain.repository.asset_repository import TeamRepository


class TeamStore(CatalogStore[Team]):

    entity_name = "team"

    def __init__(self, repo: TeamRepository) -> None:
        super().__init__(repo)

    def by_league(self, league_id: str) -> list[Team]:
        return [t for t in self.list_active() if league_id in t.leagues]
