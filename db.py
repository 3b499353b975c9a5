import duckdb
import logging
import os

DB_FILE = os.getenv("BUDGET_DB_FILE", "budget.duckdb")
LOG_FILE = os.getenv("BUDGET_LOG_FILE", "budget.log")

# -----------------------------
# Logging
# -----------------------------
logging.basicConfig(
    filename=LOG_FILE,
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)

def log_info(msg):
    logging.info(msg)
    print(msg)

def log_error(msg):
    logging.error(msg)
    print(msg)

# -----------------------------
# Get a DB connection
# -----------------------------
def get_db():
    """
    Returns a new DuckDB connection.
    """
    return duckdb.connect(DB_FILE)

def fetch_dicts(result):
    """Turn a DuckDB result into a list of column-name keyed dicts."""
    columns = [col[0] for col in result.description]
    return [dict(zip(columns, row)) for row in result.fetchall()]

# -----------------------------
# Initialize database schema
# -----------------------------
def init_db():
    conn = get_db()
    try:
        conn.execute("CREATE SEQUENCE IF NOT EXISTS recurring_items_id_seq START 1")
        conn.execute("CREATE SEQUENCE IF NOT EXISTS planned_expenses_id_seq START 1")
        conn.execute("CREATE SEQUENCE IF NOT EXISTS balance_adjustments_id_seq START 1")

        # User settings table
        conn.execute("""
        CREATE TABLE IF NOT EXISTS user_settings (
            user_id VARCHAR PRIMARY KEY,
            initial_balance DECIMAL(12,2) NOT NULL DEFAULT 0,
            month_start_day INTEGER NOT NULL DEFAULT 1,
            currency VARCHAR NOT NULL DEFAULT 'EUR',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("User settings table ensured.")

        # Recurring incomes and expenses
        conn.execute("""
        CREATE TABLE IF NOT EXISTS recurring_items (
            id INTEGER PRIMARY KEY DEFAULT nextval('recurring_items_id_seq'),
            user_id VARCHAR NOT NULL,
            kind VARCHAR NOT NULL CHECK(kind IN ('income','expense')),
            label VARCHAR NOT NULL,
            amount DECIMAL(12,2) NOT NULL,
            day_of_month INTEGER NOT NULL,
            frequency VARCHAR NOT NULL DEFAULT 'MONTHLY',
            frequency_data VARCHAR,
            category VARCHAR,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Recurring items table ensured.")

        # Planned one-off expenses
        conn.execute("""
        CREATE TABLE IF NOT EXISTS planned_expenses (
            id INTEGER PRIMARY KEY DEFAULT nextval('planned_expenses_id_seq'),
            user_id VARCHAR NOT NULL,
            label VARCHAR NOT NULL,
            amount DECIMAL(12,2) NOT NULL,
            date DATE NOT NULL,
            spent BOOLEAN NOT NULL DEFAULT FALSE,
            category VARCHAR,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Planned expenses table ensured.")

        # Manual balance corrections
        conn.execute("""
        CREATE TABLE IF NOT EXISTS balance_adjustments (
            id INTEGER PRIMARY KEY DEFAULT nextval('balance_adjustments_id_seq'),
            user_id VARCHAR NOT NULL,
            amount DECIMAL(12,2) NOT NULL,
            description VARCHAR NOT NULL,
            type VARCHAR NOT NULL CHECK(type IN ('MANUAL_ADJUSTMENT','CORRECTION','MONTHLY_RESET')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Balance adjustments table ensured.")

        # Indexes
        conn.execute("CREATE INDEX IF NOT EXISTS idx_items_user_kind ON recurring_items(user_id, kind);")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_planned_user_date ON planned_expenses(user_id, date);")
        log_info("Indexes created/ensured.")

    except Exception as e:
        log_error(f"Error initializing DB: {e}")
        raise
    finally:
        conn.close()
        log_info("Database setup complete and connection closed.")
