"""Helpers for seeding and inspecting integration test data."""

from psycopg_pool import ConnectionPool


def insert_project(pool: ConnectionPool, owner_id: int, name: str = "project") -> int:
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute(
            "INSERT INTO projects (owner_id, name) VALUES (%s, %s) RETURNING id",
            (owner_id, name),
        )
        project_id = cursor.fetchone()[0]
        conn.commit()
    return project_id


def project_owners(pool: ConnectionPool) -> dict[int, int]:
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute("SELECT id, owner_id FROM projects")
        return dict(cursor.fetchall())


def grant_admin(pool: ConnectionPool, account_id: int) -> None:
    with pool.connection() as conn:
        conn.execute("UPDATE accounts SET admin = TRUE WHERE id = %s", (account_id,))
        conn.commit()
