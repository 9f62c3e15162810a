"""Persistence of estates and trees in a relational database."""

from __future__ import annotations

import logging
import statistics
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    create_engine,
    exists,
    func,
    select,
    text,
)
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError

from .models import Estate, EstateStats, EstateTrees, Tree

logger = logging.getLogger(__name__)

SCHEMA = "plantation_management_service"

_metadata = MetaData(schema=SCHEMA)

_estates = Table(
    "estates",
    _metadata,
    Column("id", String(36), primary_key=True),
    Column("length", Integer, nullable=False),
    Column("width", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    UniqueConstraint("length", "width"),
)

_trees = Table(
    "trees",
    _metadata,
    Column("id", String(36), primary_key=True),
    Column("estate_id", String(36), nullable=False),
    Column("x", Integer, nullable=False),
    Column("y", Integer, nullable=False),
    Column("height", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

_UPSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class Repository(ABC):
    """Storage operations the HTTP handlers rely on."""

    @abstractmethod
    def create_estate(self, estate_id: str, length: int, width: int) -> str:
        """Store an estate and return the id it is known by."""

    @abstractmethod
    def get_estate(self, estate_id: str) -> Estate | None:
        """Return the estate's dimensions, or None if it does not exist."""

    @abstractmethod
    def tree_exists(self, estate_id: str, x: int, y: int) -> bool:
        """Tell whether a tree already stands on the given plot."""

    @abstractmethod
    def create_tree(self, tree_id: str, estate_id: str, x: int, y: int, height: int) -> str:
        """Store a tree and return its id."""

    @abstractmethod
    def get_estate_stats(self, estate_id: str) -> EstateStats:
        """Return count, max, min and median of the estate's tree heights."""

    @abstractmethod
    def get_estate_trees(self, estate_id: str) -> EstateTrees:
        """Return the estate with every tree planted in it."""


@contextmanager
def _logged(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError:
        logger.exception("err %s", action)
        raise


def _normalise_dsn(dsn: str) -> str:
    if dsn.startswith("postgres://"):
        return "postgresql://" + dsn[len("postgres://"):]
    return dsn


class PostgresRepository(Repository):
    """Repository backed by PostgreSQL (SQLite URLs work for local use)."""

    def __init__(self, dsn: str) -> None:
        url = make_url(_normalise_dsn(dsn))
        backend = url.get_backend_name()
        if backend not in _UPSERTS:
            raise ValueError(f"unsupported database backend: {backend}")

        options = {}
        if backend == "sqlite":
            # SQLite has no schemas; keep the tables in the main database.
            options["schema_translate_map"] = {SCHEMA: None}

        self._engine = create_engine(url, execution_options=options)
        self._insert = _UPSERTS[backend]

        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("error connecting to the database")
            self._engine.dispose()
            raise
        logger.info("successfully connected to the database")

    def _create_tables(self) -> None:
        _metadata.create_all(self._engine)

    def close(self) -> None:
        """Release every pooled connection."""
        self._engine.dispose()

    def create_estate(self, estate_id: str, length: int, width: int) -> str:
        """Insert an estate; an estate of the same size is refreshed and its id returned."""
        statement = (
            self._insert(_estates)
            .values(id=estate_id, length=length, width=width, created_at=func.now())
            .on_conflict_do_update(
                index_elements=[_estates.c.length, _estates.c.width],
                set_={"created_at": func.now()},
            )
        )
        lookup = select(_estates.c.id).where(
            _estates.c.length == length, _estates.c.width == width
        )
        with _logged("creating estate"), self._engine.begin() as conn:
            conn.execute(statement)
            return conn.execute(lookup).scalar_one()

    def get_estate(self, estate_id: str) -> Estate | None:
        query = select(_estates.c.length, _estates.c.width).where(_estates.c.id == estate_id)
        with _logged("selecting the length and the width of the estate"), self._engine.connect() as conn:
            row = conn.execute(query).first()
        if row is None:
            logger.info("no estate is found with id %s", estate_id)
            return None
        return Estate(length=row.length, width=row.width)

    def tree_exists(self, estate_id: str, x: int, y: int) -> bool:
        query = select(
            exists().where(
                _trees.c.estate_id == estate_id,
                _trees.c.x == x,
                _trees.c.y == y,
            )
        )
        with _logged("checking whether a tree exists"), self._engine.connect() as conn:
            return bool(conn.execute(query).scalar_one())

    def create_tree(self, tree_id: str, estate_id: str, x: int, y: int, height: int) -> str:
        statement = (
            _trees.insert()
            .values(id=tree_id, estate_id=estate_id, x=x, y=y, height=height, created_at=func.now())
        )
        with _logged("creating tree"), self._engine.begin() as conn:
            conn.execute(statement)
        return tree_id

    def get_estate_stats(self, estate_id: str) -> EstateStats:
        query = select(_trees.c.height).where(_trees.c.estate_id == estate_id)
        with _logged("getting estate stats"), self._engine.connect() as conn:
            heights = list(conn.execute(query).scalars())
        if not heights:
            return EstateStats(count=0, max=0, min=0, median=0.0)
        return EstateStats(
            count=len(heights),
            max=max(heights),
            min=min(heights),
            median=float(statistics.median(heights)),
        )

    def get_estate_trees(self, estate_id: str) -> EstateTrees:
        """Return the estate and its trees; raise LookupError if the estate is unknown."""
        trees_query = select(_trees.c.x, _trees.c.y, _trees.c.height).where(
            _trees.c.estate_id == estate_id
        )
        estate_query = select(_estates.c.length, _estates.c.width).where(
            _estates.c.id == estate_id
        )
        with _logged("getting the trees of an estate"), self._engine.connect() as conn:
            trees = tuple(
                Tree(x=row.x, y=row.y, height=row.height) for row in conn.execute(trees_query)
            )
            row = conn.execute(estate_query).first()
        if row is None:
            logger.error("no estate is found with id %s", estate_id)
            raise LookupError(f"estate {estate_id} not found")
        return EstateTrees(estate=Estate(length=row.length, width=row.width), trees=trees)