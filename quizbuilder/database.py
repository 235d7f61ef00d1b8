from functools import lru_cache
from uuid import uuid4
import logging

from postgrest.exceptions import APIError
from sqlalchemy import create_engine, event, select as sa_select, insert as sa_insert, \
    update as sa_update, delete as sa_delete
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from supabase import create_client, Client

from quizbuilder.config import settings
from quizbuilder.exceptions import ConstraintViolation, StoreError

Base = declarative_base()

UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc) -> bool:
    """True when a driver/REST error is a uniqueness rejection"""
    code = getattr(exc, "code", None) or getattr(exc, "sqlstate", None) or getattr(exc, "pgcode", None)
    if code == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(exc)


# Supabase Client Setup
def get_supabase_client() -> Client:
    """Get Supabase client for authentication operations"""
    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key.get_secret_value()
    )

def get_supabase_admin_client() -> Client:
    """Get Supabase admin client for data operations"""
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key.get_secret_value()
    )


class SupabaseDatabase:
    """Group store over the Supabase REST API.

    Every method issues exactly one PostgREST request, so each call is
    atomic on its own and nothing spans two calls.
    """

    def __init__(self, client: Client):
        self.client = client

    @staticmethod
    def _apply_filters(query, filters: dict):
        for key, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set)):
                query = query.in_(key, list(value))
            elif value is None:
                query = query.is_(key, "null")
            else:
                query = query.eq(key, value)
        return query

    @staticmethod
    def _translate(table: str, action: str, e: APIError):
        if is_unique_violation(e):
            logging.warning(f"{action} rejected by unique constraint in {table}: {e.message}")
            return ConstraintViolation(e.message)
        logging.error(f"{action} error in {table}: {e.message}")
        return StoreError(e.message)

    def insert(self, table: str, data: dict):
        """Insert data into table"""
        try:
            result = self.client.table(table).insert(data).execute()
            return result.data[0] if result.data else None
        except APIError as e:
            raise self._translate(table, "Insert", e) from e

    def select(self, table: str, columns: str = "*", filters: dict = None,
               order_by: str = None, desc: bool = False, limit: int = None):
        """Select data from table"""
        try:
            query = self._apply_filters(self.client.table(table).select(columns), filters)

            if order_by:
                query = query.order(order_by, desc=desc)

            if limit:
                query = query.limit(limit)

            result = query.execute()
            return result.data
        except APIError as e:
            raise self._translate(table, "Select", e) from e

    def update(self, table: str, data: dict, filters: dict):
        """Update data in table"""
        try:
            query = self._apply_filters(self.client.table(table).update(data), filters)
            result = query.execute()
            return result.data[0] if result.data else None
        except APIError as e:
            raise self._translate(table, "Update", e) from e

    def delete(self, table: str, filters: dict):
        """Delete data from table"""
        try:
            query = self._apply_filters(self.client.table(table).delete(), filters)
            result = query.execute()
            return result.data
        except APIError as e:
            raise self._translate(table, "Delete", e) from e

    def delete_exercise_tree(self, exercise_id: str, module_id: str):
        """Remove an exercise with its alternatives and exam answers in one RPC"""
        try:
            self.client.rpc("delete_exercise_nuclear", {
                "exercise_id_param": exercise_id,
                "module_id_param": module_id,
            }).execute()
        except APIError as e:
            raise self._translate("exercises", "Delete", e) from e


class SQLDatabase:
    """Group store over a SQLAlchemy engine (PostgreSQL or SQLite).

    Mirrors SupabaseDatabase call for call; each call runs in its own
    ``engine.begin()`` block.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def _table(self, name: str):
        return Base.metadata.tables[name]

    def _where(self, stmt, table, filters: dict):
        for key, value in (filters or {}).items():
            column = table.c[key]
            if isinstance(value, (list, tuple, set)):
                stmt = stmt.where(column.in_(list(value)))
            elif value is None:
                stmt = stmt.where(column.is_(None))
            else:
                stmt = stmt.where(column == value)
        return stmt

    @staticmethod
    def _translate(table: str, action: str, e: SQLAlchemyError):
        message = str(getattr(e, "orig", None) or e)
        if isinstance(e, IntegrityError) and is_unique_violation(e.orig):
            logging.warning(f"{action} rejected by unique constraint in {table}: {message}")
            return ConstraintViolation(message)
        logging.error(f"{action} error in {table}: {message}")
        return StoreError(message)

    def insert(self, table: str, data: dict):
        """Insert data into table"""
        t = self._table(table)
        row = dict(data)
        row.setdefault("id", str(uuid4()))
        try:
            with self.engine.begin() as conn:
                conn.execute(sa_insert(t).values(**row))
                created = conn.execute(sa_select(t).where(t.c.id == row["id"])).mappings().first()
            return dict(created)
        except SQLAlchemyError as e:
            raise self._translate(table, "Insert", e) from e

    def select(self, table: str, columns: str = "*", filters: dict = None,
               order_by: str = None, desc: bool = False, limit: int = None):
        """Select data from table"""
        t = self._table(table)
        if columns == "*":
            stmt = sa_select(t)
        else:
            stmt = sa_select(*[t.c[name.strip()] for name in columns.split(",")])
        stmt = self._where(stmt, t, filters)

        if order_by:
            column = t.c[order_by]
            stmt = stmt.order_by(column.desc() if desc else column.asc())

        if limit:
            stmt = stmt.limit(limit)

        try:
            with self.engine.begin() as conn:
                return [dict(r) for r in conn.execute(stmt).mappings().all()]
        except SQLAlchemyError as e:
            raise self._translate(table, "Select", e) from e

    def update(self, table: str, data: dict, filters: dict):
        """Update data in table"""
        t = self._table(table)
        try:
            with self.engine.begin() as conn:
                ids = [r.id for r in conn.execute(self._where(sa_select(t.c.id), t, filters))]
                if not ids:
                    return None
                conn.execute(self._where(sa_update(t), t, filters).values(**data))
                row = conn.execute(sa_select(t).where(t.c.id == ids[0])).mappings().first()
            return dict(row) if row else None
        except SQLAlchemyError as e:
            raise self._translate(table, "Update", e) from e

    def delete(self, table: str, filters: dict):
        """Delete data from table"""
        t = self._table(table)
        try:
            with self.engine.begin() as conn:
                rows = [dict(r) for r in conn.execute(self._where(sa_select(t), t, filters)).mappings()]
                conn.execute(self._where(sa_delete(t), t, filters))
            return rows
        except SQLAlchemyError as e:
            raise self._translate(table, "Delete", e) from e

    def delete_exercise_tree(self, exercise_id: str, module_id: str):
        """Remove an exercise with its alternatives"""
        alternatives = self._table("alternatives")
        exercises = self._table("exercises")
        try:
            with self.engine.begin() as conn:
                conn.execute(sa_delete(alternatives).where(alternatives.c.exercise_id == exercise_id))
                conn.execute(
                    sa_delete(exercises)
                    .where(exercises.c.id == exercise_id)
                    .where(exercises.c.module_id == module_id)
                )
        except SQLAlchemyError as e:
            raise self._translate("exercises", "Delete", e) from e


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_sql_engine(url: str) -> Engine:
    """Build an engine; in-memory SQLite shares one connection across threads"""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(url, pool_pre_ping=True)


def init_models(engine: Engine):
    """Create all tables and constraints on the given engine"""
    # Registers the tables on Base.metadata
    import quizbuilder.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


@lru_cache
def get_database():
    """Return the configured store backend"""
    if settings.database_backend == "sql":
        import quizbuilder.models  # noqa: F401
        return SQLDatabase(create_sql_engine(settings.database_url))
    return SupabaseDatabase(get_supabase_admin_client())
