"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Consistency Design:
-------------------
1. **Unique email**: The UNIQUE index on accounts.email settles concurrent
   signups. A violation surfaces as EmailAlreadyTaken for the domain to
   resolve.

2. **Conditional activation**: activate() only flips rows that are still
   unactivated and still hold the digest the caller verified, so a token
   regenerated in between cannot be used.

3. **Delete-and-reassign**: Projects are moved to the new owner and the
   account is deleted inside one transaction. projects.owner_id has no
   ON DELETE CASCADE, so a delete that left a project behind fails at
   the foreign key and the whole transaction rolls back.
"""

import logging
from pathlib import Path
from typing import Any

from psycopg import errors, sql
from psycopg_pool import ConnectionPool

from account_core.domain.exceptions import AccountNotFound, EmailAlreadyTaken
from account_core.domain.models import Account, NewAccount, Page, Project

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = (
    "id, email, name, provider, uid, password_digest, activated, activated_at, "
    "activation_digest, admin, created_at, updated_at"
)

# Columns update() may write. Admin status is never granted through it.
_UPDATABLE_COLUMNS = frozenset({"name", "email", "password_digest"})


def _row_to_account(row: tuple) -> Account:
    return Account(
        id=row[0],
        email=row[1],
        name=row[2],
        provider=row[3],
        uid=row[4],
        password_digest=row[5],
        activated=row[6],
        activated_at=row[7],
        activation_digest=row[8],
        admin=row[9],
        created_at=row[10],
        updated_at=row[11],
    )


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_id(self, account_id: int) -> Account:
        row = self._fetch_one(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = %s", (account_id,)
        )
        if row is None:
            raise AccountNotFound(str(account_id))
        return _row_to_account(row)

    def find_by_email(self, email: str) -> Account | None:
        row = self._fetch_one(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE email = %s", (email,)
        )
        return _row_to_account(row) if row is not None else None

    def find_by_provider_uid(self, provider: str, uid: str) -> Account | None:
        row = self._fetch_one(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE provider = %s AND uid = %s",
            (provider, uid),
        )
        return _row_to_account(row) if row is not None else None

    def list_page(self, page_token: str | None, page_size: int) -> Page[Account]:
        """
        Keyset pagination on id.

        The token is the last id of the previous page. A missing or
        malformed token starts from the first account.
        """
        try:
            after_id = int(page_token) if page_token else 0
        except ValueError:
            after_id = 0

        query = f"""
            SELECT {_ACCOUNT_COLUMNS} FROM accounts
            WHERE id > %s
            ORDER BY id
            LIMIT %s
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            # One extra row tells us whether another page exists.
            cursor.execute(query, (after_id, page_size + 1))
            rows = cursor.fetchall()

        accounts = [_row_to_account(row) for row in rows[:page_size]]
        next_token = str(accounts[-1].id) if accounts and len(rows) > page_size else None
        return Page(items=accounts, next_page_token=next_token)

    def list_projects(self, owner_id: int) -> list[Project]:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                "SELECT id, owner_id, name FROM projects WHERE owner_id = %s ORDER BY id",
                (owner_id,),
            )
            return [Project(id=r[0], owner_id=r[1], name=r[2]) for r in cursor.fetchall()]

    def create(self, account: NewAccount) -> Account:
        query = f"""
            INSERT INTO accounts (email, name, provider, uid, password_digest, activated, activated_at)
            VALUES (%s, %s, %s, %s, %s, %s, CASE WHEN %s THEN NOW() END)
            RETURNING {_ACCOUNT_COLUMNS}
        """
        params = (
            account.email,
            account.name,
            account.provider,
            account.uid,
            account.password_digest,
            account.activated,
            account.activated,
        )
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(query, params)
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation:
            raise EmailAlreadyTaken(account.email) from None
        return _row_to_account(row)

    def update(self, account_id: int, changes: dict[str, Any]) -> Account:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")
        if not changes:
            return self.find_by_id(account_id)

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in changes
        )
        query = sql.SQL(
            "UPDATE accounts SET {}, updated_at = NOW() WHERE id = %s RETURNING "
            + _ACCOUNT_COLUMNS
        ).format(assignments)

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(query, (*changes.values(), account_id))
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation:
            raise EmailAlreadyTaken(str(changes.get("email"))) from None

        if row is None:
            raise AccountNotFound(str(account_id))
        return _row_to_account(row)

    def set_activation_digest(self, account_id: int, digest: str) -> None:
        # updated_at is left alone: a resent link is not a profile change.
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                "UPDATE accounts SET activation_digest = %s WHERE id = %s",
                (digest, account_id),
            )
            conn.commit()
            if cursor.rowcount != 1:
                raise AccountNotFound(str(account_id))

    def activate(self, account_id: int, expected_digest: str) -> bool:
        query = """
            UPDATE accounts
            SET activated = TRUE,
                activated_at = NOW(),
                activation_digest = NULL,
                updated_at = NOW()
            WHERE id = %s AND activated = FALSE AND activation_digest = %s
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(query, (account_id, expected_digest))
            conn.commit()
            return cursor.rowcount == 1

    def delete_reassigning_projects(self, account_id: int, new_owner_id: int) -> int:
        """
        Move all projects of account_id to new_owner_id, then delete the account.

        Both statements run in one transaction. If the account is gone
        by the time DELETE runs, the reassignment is rolled back too.

        Raises:
            AccountNotFound: If account_id does not exist
        """
        with self._pool.connection() as conn, conn.transaction(), conn.cursor() as cursor:
            cursor.execute(
                "SELECT id FROM accounts WHERE id = %s FOR UPDATE", (account_id,)
            )
            if cursor.fetchone() is None:
                raise AccountNotFound(str(account_id))

            cursor.execute(
                "UPDATE projects SET owner_id = %s WHERE owner_id = %s",
                (new_owner_id, account_id),
            )
            reassigned = cursor.rowcount

            cursor.execute("DELETE FROM accounts WHERE id = %s", (account_id,))
            if cursor.rowcount != 1:
                raise AccountNotFound(str(account_id))

        return reassigned

    def _fetch_one(self, query: str, params: tuple) -> tuple | None:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(query, params)
            return cursor.fetchone()


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: account_core/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
