"""
Persistence operation contract.

Three capabilities an entity type opts into, independent of its shape:

- Create[E, A]: insert a row from an attributes payload A, return entity E
- FindByPk[E]: fetch exactly one row by primary key
- Find[E]: fetch one row matching an allow-listed field = value conjunction

Every operation takes the connection handle as an explicit argument, so the
same code runs against a PostgresService pool or a test double.

Repository implements all three once on top of a TableMapping. An entity type
attaches to it by subclassing and supplying its entity class, its table
mapping and its column mapping (to_row):

    class UserRepository(Repository[UserModel, UserInformation]):
        entity = UserModel
        table = USER_TABLE

        @classmethod
        async def to_row(cls, attributes): ...

    user = await UserRepository.create(info, db)
    user = await UserRepository.find_by_pk(user_id, db)
    user = await UserRepository.find({"email": "a@b.co"}, db)
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, Optional, Protocol, TypeVar
from uuid import UUID, uuid4

from loguru import logger
from pydantic import BaseModel

from ...exceptions import InvalidIdentity, NotFound
from .sql_builder import TableMapping, build_insert, build_select, build_select_by_pk

E = TypeVar("E", bound=BaseModel)
A = TypeVar("A", bound=BaseModel)


class DatabaseHandle(Protocol):
    """What persistence operations need from a connection resource."""

    async def fetchrow(self, query: str, *params: Any) -> Optional[dict[str, Any]]: ...


def parse_identity(value: Any) -> UUID:
    """
    Parse a primary-key token into a UUID.

    Raises:
        InvalidIdentity: If value is not a well-formed UUID
    """
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise InvalidIdentity(value)
    try:
        return UUID(value.strip())
    except ValueError as e:
        raise InvalidIdentity(value) from e


class Create(ABC, Generic[E, A]):
    """Capability: insert a new row."""

    @classmethod
    @abstractmethod
    async def create(cls, attributes: A, db: DatabaseHandle) -> Optional[E]:
        """
        Insert a new row with a freshly generated identity.

        Returns:
            The stored entity, or None when the natural key already exists
        """


class FindByPk(ABC, Generic[E]):
    """Capability: look up one row by primary key."""

    @classmethod
    @abstractmethod
    async def find_by_pk(cls, id: str | UUID, db: DatabaseHandle) -> E:
        """
        Raises:
            InvalidIdentity: Malformed id (no storage round-trip)
            NotFound: No row with this id
        """


class Find(ABC, Generic[E]):
    """Capability: look up one row by a conjunction of field = value constraints."""

    @classmethod
    @abstractmethod
    async def find(cls, fields: Mapping[str, Any], db: DatabaseHandle) -> E:
        """
        Raises:
            InvalidQuery: Field outside the allow-list or bad value (no storage round-trip)
            NotFound: No matching row
        """


class Repository(Create[E, A], Find[E], FindByPk[E]):
    """Shared implementation of Create, Find and FindByPk over a TableMapping."""

    entity: ClassVar[type[BaseModel]]
    table: ClassVar[TableMapping]

    @classmethod
    @abstractmethod
    async def to_row(cls, attributes: A) -> dict[str, Any]:
        """Map an attributes payload onto table.insert_columns, minus the identity."""

    @classmethod
    def new_identity(cls) -> UUID:
        return uuid4()

    @classmethod
    async def create(cls, attributes: A, db: DatabaseHandle) -> Optional[E]:
        row = await cls.to_row(attributes)
        row[cls.table.primary_key] = cls.new_identity()

        sql, params = build_insert(cls.table, row)
        record = await db.fetchrow(sql, *params)

        if record is None:
            logger.info(
                f"{cls.entity.__name__} insert skipped: "
                f"{cls.table.conflict_target} already exists"
            )
            return None

        logger.debug(f"Created {cls.entity.__name__} {record[cls.table.primary_key]}")
        return cls.entity.model_validate(record)

    @classmethod
    async def find_by_pk(cls, id: str | UUID, db: DatabaseHandle) -> E:
        identity = parse_identity(id)

        sql, params = build_select_by_pk(cls.table, identity)
        record = await db.fetchrow(sql, *params)

        if record is None:
            raise NotFound(cls.entity.__name__, {cls.table.primary_key: str(identity)})
        return cls.entity.model_validate(record)

    @classmethod
    async def find(cls, fields: Mapping[str, Any], db: DatabaseHandle) -> E:
        filters = dict(fields)
        if cls.table.primary_key in filters:
            filters[cls.table.primary_key] = parse_identity(filters[cls.table.primary_key])

        sql, params = build_select(cls.table, filters)
        record = await db.fetchrow(sql, *params)

        if record is None:
            raise NotFound(cls.entity.__name__, filters)
        return cls.entity.model_validate(record)
