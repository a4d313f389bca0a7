from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import inspect

from dineflow.application.ports.repositories import MenuRepository, TableRepository
from dineflow.domain.common.ids import MenuItemId, TableId
from dineflow.domain.common.money import Money
from dineflow.domain.menu.entities import AvailabilityStatus, MenuItem
from dineflow.domain.table.entities import Table, TablePosition, TableStatus
from dineflow.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository
from dineflow.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from dineflow.infrastructure.db.session import get_engine

DEMO_MENU = [
    ("itm_001", "Margherita Pizza", "Tomato, mozzarella, basil", 1450, "mains", 18),
    ("itm_002", "Chicken Alfredo", "Fettuccine, creamy parmesan sauce", 1690, "mains", 20),
    ("itm_003", "Caesar Salad", "Romaine, croutons, parmesan", 990, "starters", 8),
    ("itm_004", "Tiramisu", "Espresso-soaked ladyfingers", 850, "desserts", 5),
]

DEMO_FLOOR = [
    (1, 2, 0.0, 0.0),
    (2, 2, 1.0, 0.0),
    (3, 4, 0.0, 1.0),
    (4, 4, 1.0, 1.0),
    (5, 4, 2.0, 1.0),
    (6, 8, 0.0, 2.0),
]


def seed_demo_data(menu_repository: MenuRepository, table_repository: TableRepository) -> None:
    """Upsert a small menu and floor plan under fixed ids so reruns are harmless."""
    now = datetime.now(timezone.utc)
    for item_id, name, description, price_cents, category, prep_minutes in DEMO_MENU:
        menu_repository.save(
            MenuItem(
                item_id=MenuItemId(item_id),
                name=name,
                description=description,
                price_money=Money(amount_cents=price_cents, currency="USD"),
                category=category,
                availability=(
                    AvailabilityStatus.LIMITED
                    if category == "desserts"
                    else AvailabilityStatus.AVAILABLE
                ),
                prep_time_minutes=prep_minutes,
                updated_at=now,
            )
        )

    for number, capacity, x, y in DEMO_FLOOR:
        existing = table_repository.get_by_number(number)
        if existing is not None:
            continue
        table_repository.save(
            Table(
                table_id=TableId(f"tbl_{number:03d}"),
                number=number,
                capacity=capacity,
                status=TableStatus.AVAILABLE,
                position=TablePosition(x=x, y=y),
                updated_at=now,
            )
        )


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    required_tables = {"menu_items", "restaurant_tables"}
    if not required_tables.issubset(set(inspect(engine).get_table_names())):
        print("no schema yet")
        return

    seed_demo_data(SqlAlchemyMenuRepository(engine), SqlAlchemyTableRepository(engine))
    print("seed complete")


if __name__ == "__main__":
    main()
