"""Wires repositories into the catalog, order and identity stores.

Built once at startup and passed around explicitly; there is no module-level
store.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from . import memory, sql
from .catalog import CatalogStore
from .config import ConfigState
from .db import create_schema, make_engine, make_session_factory
from .identity import IdentityStore
from .orders import OrderEngine
from .seed import seed_demo_data


@dataclass
class Services:
    catalog: CatalogStore
    orders: OrderEngine
    identity: IdentityStore
    engine: Optional[Engine] = None

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def memory_services() -> Services:
    catalog = CatalogStore(memory.MemoryProductRepository(), memory.MemoryCategoryRepository())
    return Services(
        catalog=catalog,
        orders=OrderEngine(memory.MemoryOrderRepository(), catalog),
        identity=IdentityStore(memory.MemoryUserRepository()),
    )


def sql_services(database_url: str) -> Services:
    engine = make_engine(database_url)
    create_schema(engine)
    sessions = make_session_factory(engine)
    catalog = CatalogStore(sql.SqlProductRepository(sessions), sql.SqlCategoryRepository(sessions))
    return Services(
        catalog=catalog,
        orders=OrderEngine(sql.SqlOrderRepository(sessions), catalog),
        identity=IdentityStore(sql.SqlUserRepository(sessions)),
        engine=engine,
    )


def build_services(settings: ConfigState) -> Services:
    if settings.storage == "sql":
        services = sql_services(settings.database_url)
    else:
        services = memory_services()
    if settings.seed:
        seed_demo_data(services)
    return services
