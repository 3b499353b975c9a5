from db import fetch_dicts

# -----------------------------
# Recurring Items Repository
# -----------------------------

def get_recurring_items(conn, user_id, kind):
    """
    Returns the recurring incomes or expenses of a user.
    - kind: 'income' or 'expense'
    Rows are ordered by due day, largest amount first.
    """
    return fetch_dicts(conn.execute(
        """
        SELECT id, label, amount, day_of_month, frequency, frequency_data, category
        FROM recurring_items
        WHERE user_id = ? AND kind = ?
        ORDER BY day_of_month ASC, amount DESC, id ASC
        """,
        [user_id, kind]
    ))


def add_recurring_item(conn, user_id, kind, label, amount, day_of_month,
                       frequency='MONTHLY', frequency_data=None, category=None):
    """
    Inserts a recurring item and returns its id.
    - frequency_data: JSON text or None
    """
    row = conn.execute(
        """
        INSERT INTO recurring_items
        (user_id, kind, label, amount, day_of_month, frequency, frequency_data, category)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        RETURNING id
        """,
        [user_id, kind, label, amount, day_of_month, frequency, frequency_data, category]
    ).fetchone()
    return row[0]


def delete_recurring_item(conn, user_id, kind, item_id):
    row = conn.execute(
        "DELETE FROM recurring_items WHERE id = ? AND user_id = ? AND kind = ? RETURNING id",
        [item_id, user_id, kind]
    ).fetchone()
    if row is None:
        raise ValueError(f"{kind.capitalize()} {item_id} not found")
