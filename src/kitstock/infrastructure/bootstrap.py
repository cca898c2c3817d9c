"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Stores are built once
per ``build_services`` call and handed to each other explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kitstock.application.allocate_product import ProductAllocator
from kitstock.application.badge_store import BadgeStore
from kitstock.application.inventory_log_store import InventoryLogStore
from kitstock.application.kit_type_store import KitTypeStore
from kitstock.application.nameset_store import NamesetStore
from kitstock.application.product_store import ProductStore
from kitstock.application.reservation_store import ReservationStore
from kitstock.application.return_store import ReturnStore
from kitstock.application.sale_store import SaleStore
from kitstock.application.team_store import TeamStore
from kitstock.domain.service.cascade import Cascade
from kitstock.infrastructure.config import Settings, load_settings
from kitstock.infrastructure.persistence.json_asset_repositories import (
    JsonBadgeRepository,
    JsonKitTypeRepository,
    JsonNamesetRepository,
    JsonTeamRepository,
)
from kitstock.infrastructure.persistence.json_inventory_log_repository import (
    JsonInventoryLogRepository,
)
from kitstock.infrastructure.persistence.json_product_repository import JsonProductRepository
from kitstock.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)
from kitstock.infrastructure.persistence.json_return_repository import JsonReturnRepository
from kitstock.infrastructure.persistence.json_sale_repository import JsonSaleRepository

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Settings
    products: ProductStore
    namesets: NamesetStore
    badges: BadgeStore
    teams: TeamStore
    kit_types: KitTypeStore
    sales: SaleStore
    reservations: ReservationStore
    returns: ReturnStore
    history: InventoryLogStore
    allocator: ProductAllocator


def build_services(settings: Settings | None = None) -> Services:
    settings = settings or load_settings()
    data = settings.data_dir
    products_file = data / "products.json"
    namesets_file = data / "namesets.json"
    cascade = Cascade(settings.cascade_policy)

    history = InventoryLogStore(JsonInventoryLogRepository(data / "inventory_logs.json"))
    products = ProductStore(JsonProductRepository(products_file), journal=history)
    namesets = NamesetStore(
        JsonNamesetRepository(namesets_file, referenced_by=[(products_file, "nameset_id")])
    )
    badges = BadgeStore(
        JsonBadgeRepository(data / "badges.json", referenced_by=[(products_file, "badge_id")])
    )
    teams = TeamStore(
        JsonTeamRepository(data / "teams.json", referenced_by=[(products_file, "team_id")])
    )
    kit_types = KitTypeStore(
        JsonKitTypeRepository(
            data / "kit_types.json",
            referenced_by=[(products_file, "kit_type_id"), (namesets_file, "kit_type_id")],
        )
    )
    returns = ReturnStore(JsonReturnRepository(data / "returns.json"))
    sales = SaleStore(
        JsonSaleRepository(data / "sales.json"), products, returns, cascade, journal=history
    )
    reservations = ReservationStore(
        JsonReservationRepository(data / "reservations.json"), products, sales, cascade,
        journal=history,
    )
    allocator = ProductAllocator(products, namesets, badges, cascade, journal=history)

    logger.debug("Services wired over %s (%s)", data, settings.cascade_policy.value)
    return Services(
        settings=settings,
        products=products,
        namesets=namesets,
        badges=badges,
        teams=teams,
        kit_types=kit_types,
        sales=sales,
        reservations=reservations,
        returns=returns,
        history=history,
        allocator=allocator,
    )
