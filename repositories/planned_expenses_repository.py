from db import fetch_dicts


def get_planned_expenses(conn, user_id, spent=None):
    """
    Return planned expenses ordered by date.

    Args:
        conn: Database connection.
        user_id: Owner of the expenses.
        spent: Optional filter on the spent flag; None returns all.
    """
    query = """
        SELECT id, label, amount, date, spent, category
        FROM planned_expenses
        WHERE user_id = ?
    """
    params = [user_id]

    if spent is not None:
        query += " AND spent = ?"
        params.append(spent)

    query += " ORDER BY date ASC, id ASC"

    return fetch_dicts(conn.execute(query, params))


def add_planned_expense(conn, user_id, label, amount, date, category=None, spent=False):
    row = conn.execute(
        """
        INSERT INTO planned_expenses (user_id, label, amount, date, category, spent)
        VALUES (?, ?, ?, ?, ?, ?)
        RETURNING id
        """,
        [user_id, label, amount, date, category, spent]
    ).fetchone()
    return row[0]


def set_spent(conn, user_id, expense_id, spent):
    """
    Mark a planned expense as spent (or not).

    Raises:
        ValueError: if the expense does not exist for this user.
    """
    row = conn.execute(
        "UPDATE planned_expenses SET spent = ? WHERE id = ? AND user_id = ? RETURNING id",
        [spent, expense_id, user_id]
    ).fetchone()
    if row is None:
        raise ValueError(f"Planned expense {expense_id} not found")


def delete_planned_expense(conn, user_id, expense_id):
    row = conn.execute(
        "DELETE FROM planned_expenses WHERE id = ? AND user_id = ? RETURNING id",
        [expense_id, user_id]
    ).fetchone()
    if row is None:
        raise ValueError(f"Planned expense {expense_id} not found")
