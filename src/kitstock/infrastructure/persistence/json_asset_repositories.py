"""JSON-file-backed repositories for namesets, badges, teams and kit types."""

from __future__ import annotations

from datetime import datetime, timezone

from kitstock.domain.model.badge import Badge
from kitstock.domain.model.kit_type import DEFAULT_KIT_TYPES, KitType
from kitstock.domain.model.nameset import Nameset
from kitstock.domain.model.team import Team
from kitstock.domain.repository.asset_repository import (
    BadgeRepository,
    KitTypeRepository,
    NamesetRepository,
    TeamRepository,
)
from kitstock.infrastructure.persistence.codec import (
    dump_datetime,
    dump_money,
    load_datetime,
    load_money,
)
from kitstock.infrastructure.persistence.json_catalog_repository import JsonCatalogRepository


class JsonNamesetRepository(JsonCatalogRepository[Nameset], NamesetRepository):

    entity_name = "nameset"

    @staticmethod
    def _to_raw(nameset: Nameset) -> dict:
        return {
            "id": nameset.id,
            "player_name": nameset.player_name,
            "number": nameset.number,
            "season": nameset.season,
            "quantity": nameset.quantity,
            "kit_type_id": nameset.kit_type_id,
            "price": dump_money(nameset.price),
            "location": nameset.location,
            "created_at": dump_datetime(nameset.created_at),
            "archived_at": dump_datetime(nameset.archived_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Nameset:
        return Nameset(
            id=raw["id"],
            player_name=raw["player_name"],
            number=raw["number"],
            season=raw["season"],
            quantity=raw["quantity"],
            kit_type_id=raw["kit_type_id"],
            price=load_money(raw.get("price")),
            location=raw.get("location"),
            created_at=load_datetime(raw["created_at"]),
            archived_at=load_datetime(raw.get("archived_at")),
        )


class JsonBadgeRepository(JsonCatalogRepository[Badge], BadgeRepository):

    entity_name = "badge"

    @staticmethod
    def _to_raw(badge: Badge) -> dict:
        return {
            "id": badge.id,
            "name": badge.name,
            "season": badge.season,
            "quantity": badge.quantity,
            "price": dump_money(badge.price),
            "location": badge.location,
            "created_at": dump_datetime(badge.created_at),
            "archived_at": dump_datetime(badge.archived_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Badge:
        return Badge(
            id=raw["id"],
            name=raw["name"],
            season=raw["season"],
            quantity=raw["quantity"],
            price=load_money(raw["price"]),
            location=raw.get("location"),
            created_at=load_datetime(raw["created_at"]),
            archived_at=load_datetime(raw.get("archived_at")),
        )


class JsonTeamRepository(JsonCatalogRepository[Team], TeamRepository):

    entity_name = "team"
    unique_field = "name"

    @staticmethod
    def _to_raw(team: Team) -> dict:
        return {
            "id": team.id,
            "name": team.name,
            "leagues": list(team.leagues),
            "created_at": dump_datetime(team.created_at),
            "archived_at": dump_datetime(team.archived_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Team:
        return Team(
            id=raw["id"],
            name=raw["name"],
            leagues=list(raw.get("leagues", [])),
            created_at=load_datetime(raw["created_at"]),
            archived_at=load_datetime(raw.get("archived_at")),
        )


class JsonKitTypeRepository(JsonCatalogRepository[KitType], KitTypeRepository):

    entity_name = "kit type"
    unique_field = "name"

    @staticmethod
    def _to_raw(kit_type: KitType) -> dict:
        return {
            "id": kit_type.id,
            "name": kit_type.name,
            "created_at": dump_datetime(kit_type.created_at),
            "archived_at": dump_datetime(kit_type.archived_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> KitType:
        return KitType(
            id=raw["id"],
            name=raw["name"],
            created_at=load_datetime(raw["created_at"]),
            archived_at=load_datetime(raw.get("archived_at")),
        )

    def _seed_rows(self) -> list[dict]:
        seeded_at = datetime.now(timezone.utc)
        return [
            self._to_raw(KitType(id=kit_type_id, name=name, created_at=seeded_at))
            for kit_type_id, name in DEFAULT_KIT_TYPES.items()
        ]
