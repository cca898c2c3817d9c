"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.

Every fake records the calls it receives in ``calls`` and can be told to
reject calls with a ``PersistenceError``:

    repo.fail_next("update", ErrorCode.NETWORK)        # next update only
    repo.fail_on("update", "2", ErrorCode.TIMEOUT)     # every update of id 2
"""

from __future__ import annotations

import copy
import dataclasses
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from kitstock.domain.exceptions import ErrorCode, PersistenceError
from kitstock.domain.model.badge import Badge
from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.inventory_log import InventoryLogEntry, InventoryLogFilters
from kitstock.domain.model.kit_type import KitType
from kitstock.domain.model.line_item import LineItem
from kitstock.domain.model.nameset import Nameset
from kitstock.domain.model.product import Product, ProductType
from kitstock.domain.model.product_return import ProductReturn
from kitstock.domain.model.reservation import Reservation
from kitstock.domain.model.sale import Sale
from kitstock.domain.model.stock import SizeStock
from kitstock.domain.model.team import Team
from kitstock.domain.model.value_objects import Money
from kitstock.domain.repository.asset_repository import (
    BadgeRepository,
    KitTypeRepository,
    NamesetRepository,
    TeamRepository,
)
from kitstock.domain.repository.catalog_repository import CatalogRepository
from kitstock.domain.repository.inventory_log_repository import InventoryLogRepository
from kitstock.domain.repository.product_repository import ProductRepository
from kitstock.domain.repository.reservation_repository import ReservationRepository
from kitstock.domain.repository.return_repository import ReturnRepository
from kitstock.domain.repository.sale_repository import SaleRepository

T = TypeVar("T")


class FakeTable(Generic[T]):

    def __init__(self, records: list[T] | None = None) -> None:
        self._store: dict[str, T] = {}
        self._next_id = 1
        self._fail_next: dict[str, ErrorCode] = {}
        self._fail_on: dict[tuple[str, str], ErrorCode] = {}
        self.calls: list[tuple[str, str | None]] = []
        for record in records or []:
            self._store[record.id] = copy.deepcopy(record)

    # --- Failure injection ----------------------------------------------------

    def fail_next(self, operation: str, code: ErrorCode = ErrorCode.NETWORK) -> None:
        self._fail_next[operation] = code

    def fail_on(self, operation: str, record_id: str, code: ErrorCode = ErrorCode.NETWORK) -> None:
        self._fail_on[(operation, record_id)] = code

    def calls_for(self, operation: str) -> list[str | None]:
        return [record_id for op, record_id in self.calls if op == operation]

    def _enter(self, operation: str, record_id: str | None = None) -> None:
        self.calls.append((operation, record_id))
        code = self._fail_next.pop(operation, None) or self._fail_on.get((operation, record_id))
        if code is not None:
            raise PersistenceError(code, f"{operation} rejected ({code.value})")

    # --- Storage --------------------------------------------------------------

    def _insert(self, record: T) -> T:
        while str(self._next_id) in self._store:
            self._next_id += 1
        created = dataclasses.replace(record, id=str(self._next_id))
        self._next_id += 1
        self._store[created.id] = copy.deepcopy(created)
        return created

    def _apply(self, record_id: str, changes: dict[str, Any]) -> T:
        current = self._require(record_id)
        updated = dataclasses.replace(current, **changes)
        self._store[record_id] = copy.deepcopy(updated)
        return copy.deepcopy(updated)

    def _remove(self, record_id: str) -> None:
        self._require(record_id)
        del self._store[record_id]

    def _require(self, record_id: str) -> T:
        if record_id not in self._store:
            raise PersistenceError(ErrorCode.NOT_FOUND, f"{record_id} not found")
        return copy.deepcopy(self._store[record_id])

    def stored(self, record_id: str) -> T | None:
        """Peek at what the fake holds, bypassing failure injection."""
        record = self._store.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def all_stored(self) -> list[T]:
        return [copy.deepcopy(r) for r in self._store.values()]


class FakeCatalogRepository(FakeTable[T], CatalogRepository[T]):

    def create(self, record: T) -> T:
        self._enter("create")
        return self._insert(record)

    def get_by_id(self, record_id: str) -> T | None:
        self._enter("get_by_id", record_id)
        return self.stored(record_id)

    def update(self, record_id: str, changes: dict[str, Any]) -> T:
        self._enter("update", record_id)
        return self._apply(record_id, changes)

    def delete(self, record_id: str) -> None:
        self._enter("delete", record_id)
        self._remove(record_id)

    def archive(self, record_id: str) -> T:
        self._enter("archive", record_id)
        return self._apply(record_id, {"archived_at": datetime.now(timezone.utc)})

    def restore(self, record_id: str) -> T:
        self._enter("restore", record_id)
        return self._apply(record_id, {"archived_at": None})

    def list_active(self) -> list[T]:
        self._enter("list_active")
        return [r for r in self.all_stored() if r.archived_at is None]

    def list_archived(self) -> list[T]:
        self._enter("list_archived")
        return [r for r in self.all_stored() if r.archived_at is not None]


class FakeProductRepository(FakeCatalogRepository[Product], ProductRepository):
    pass


class FakeNamesetRepository(FakeCatalogRepository[Nameset], NamesetRepository):
    pass


class FakeBadgeRepository(FakeCatalogRepository[Badge], BadgeRepository):
    pass


class FakeTeamRepository(FakeCatalogRepository[Team], TeamRepository):
    pass


class FakeKitTypeRepository(FakeCatalogRepository[KitType], KitTypeRepository):
    pass


class FakeSaleRepository(FakeTable[Sale], SaleRepository):

    def create(self, sale: Sale) -> Sale:
        self._enter("create")
        return self._insert(sale)

    def get_by_id(self, sale_id: str) -> Sale | None:
        self._enter("get_by_id", sale_id)
        return self.stored(sale_id)

    def update(self, sale_id: str, changes: dict[str, Any]) -> Sale:
        self._enter("update", sale_id)
        return self._apply(sale_id, changes)

    def delete(self, sale_id: str) -> None:
        self._enter("delete", sale_id)
        self._remove(sale_id)

    def search(self, filters: PeriodFilters) -> list[Sale]:
        self._enter("search")
        found = [s for s in self.all_stored() if filters.matches(s.date, s.sale_type)]
        return sorted(found, key=lambda s: s.date, reverse=True)


class FakeReservationRepository(FakeTable[Reservation], ReservationRepository):

    def create(self, reservation: Reservation) -> Reservation:
        self._enter("create")
        return self._insert(reservation)

    def get_by_id(self, reservation_id: str) -> Reservation | None:
        self._enter("get_by_id", reservation_id)
        return self.stored(reservation_id)

    def update(self, reservation_id: str, changes: dict[str, Any]) -> Reservation:
        self._enter("update", reservation_id)
        return self._apply(reservation_id, changes)

    def delete(self, reservation_id: str) -> None:
        self._enter("delete", reservation_id)
        self._remove(reservation_id)

    def list_all(self) -> list[Reservation]:
        self._enter("list_all")
        return sorted(self.all_stored(), key=lambda r: r.created_at, reverse=True)


class FakeReturnRepository(FakeTable[ProductReturn], ReturnRepository):

    def create(self, record: ProductReturn) -> ProductReturn:
        self._enter("create")
        return self._insert(record)

    def delete(self, return_id: str) -> None:
        self._enter("delete", return_id)
        self._remove(return_id)

    def search(self, filters: PeriodFilters) -> list[ProductReturn]:
        self._enter("search")
        found = [r for r in self.all_stored() if filters.matches(r.created_at, r.sale_type)]
        return sorted(found, key=lambda r: r.created_at, reverse=True)


class FakeInventoryLogRepository(FakeTable[InventoryLogEntry], InventoryLogRepository):

    def create_many(self, entries: list[InventoryLogEntry]) -> list[InventoryLogEntry]:
        self._enter("create_many")
        return [self._insert(entry) for entry in entries]

    def search(self, filters: InventoryLogFilters) -> list[InventoryLogEntry]:
        self._enter("search")
        return filters.apply(self.all_stored())

    def delete_before(self, cutoff: datetime) -> int:
        self._enter("delete_before")
        old = [e.id for e in self.all_stored() if e.created_at < cutoff]
        for entry_id in old:
            self._remove(entry_id)
        return len(old)


# --- Builders -----------------------------------------------------------------


def make_product(
    product_id: str,
    sizes: dict[str, int],
    price: str = "120.00",
    **fields: Any,
) -> Product:
    """A persisted-looking product with the given stock per size."""
    return Product(
        id=product_id,
        name=fields.pop("name", f"Shirt {product_id}"),
        type=fields.pop("type", ProductType.SHIRT),
        sizes=[SizeStock(size, qty) for size, qty in sizes.items()],
        price=Money.of(price),
        kit_type_id=fields.pop("kit_type_id", "default-kit-type-1st"),
        **fields,
    )


def item(product_id: str, size: str, quantity: int, price: str = "120.00") -> LineItem:
    return LineItem(product_id, size, quantity, Money.of(price))


def sizes_of(product: Product) -> dict[str, int]:
    return {s.size: s.quantity for s in product.sizes}
