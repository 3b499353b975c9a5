from db import fetch_dicts

ADJUSTMENT_HISTORY_LIMIT = 50


def get_adjustments(conn, user_id, limit=ADJUSTMENT_HISTORY_LIMIT):
    """Most recent adjustments first."""
    return fetch_dicts(conn.execute(
        """
        SELECT id, amount, description, type, created_at
        FROM balance_adjustments
        WHERE user_id = ?
        ORDER BY created_at DESC, id DESC
        LIMIT ?
        """,
        [user_id, limit]
    ))


def get_adjustment_total(conn, user_id):
    return conn.execute(
        "SELECT COALESCE(SUM(amount), 0) FROM balance_adjustments WHERE user_id = ?",
        [user_id]
    ).fetchone()[0]


def add_adjustment(conn, user_id, amount, description, type):
    row = conn.execute(
        """
        INSERT INTO balance_adjustments (user_id, amount, description, type)
        VALUES (?, ?, ?, ?)
        RETURNING id
        """,
        [user_id, amount, description, type]
    ).fetchone()
    return row[0]


def get_last_adjustment_of_type(conn, user_id, type):
    rows = fetch_dicts(conn.execute(
        """
        SELECT id, amount, description, type, created_at
        FROM balance_adjustments
        WHERE user_id = ? AND type = ?
        ORDER BY created_at DESC, id DESC
        LIMIT 1
        """,
        [user_id, type]
    ))
    return rows[0] if rows else None
