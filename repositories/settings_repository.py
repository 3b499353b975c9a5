from db import fetch_dicts

# -----------------------------
# User Settings Repository
# -----------------------------

def get_or_create_settings(conn, user_id):
    """Return the settings row for ``user_id``, creating defaults if missing.

    New users start from a zero initial balance, a month starting on day 1
    and EUR as display currency.
    """
    rows = fetch_dicts(conn.execute(
        "SELECT user_id, initial_balance, month_start_day, currency FROM user_settings WHERE user_id = ?",
        [user_id]
    ))
    if rows:
        return rows[0]

    conn.execute("INSERT INTO user_settings (user_id) VALUES (?)", [user_id])
    return fetch_dicts(conn.execute(
        "SELECT user_id, initial_balance, month_start_day, currency FROM user_settings WHERE user_id = ?",
        [user_id]
    ))[0]


def update_settings(conn, user_id, initial_balance=None, month_start_day=None):
    """
    Update the given fields; ``None`` leaves a field untouched.
    """
    get_or_create_settings(conn, user_id)

    if initial_balance is not None:
        conn.execute(
            "UPDATE user_settings SET initial_balance = ? WHERE user_id = ?",
            [initial_balance, user_id]
        )
    if month_start_day is not None:
        conn.execute(
            "UPDATE user_settings SET month_start_day = ? WHERE user_id = ?",
            [month_start_day, user_id]
        )

    return get_or_create_settings(conn, user_id)
