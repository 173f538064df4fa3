import os
import sqlite3
from datetime import datetime
from typing import Optional
from contextlib import contextmanager

from models import Todo, DEFAULT_CATEGORY, DEFAULT_PRIORITY

BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
ALEMBIC_INI = os.path.join(BACKEND_DIR, "alembic.ini")
DATABASE_PATH = os.getenv("DATABASE_PATH", os.path.join(BACKEND_DIR, "todos.db"))

@contextmanager
def get_db():
    """Context manager for database connections."""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    """
    Initialize database by running Alembic migrations.
    The migrations live beside this module, so the app must run from a source
    checkout or an editable install (pip install -e .).
    """
    import subprocess

    if not os.path.exists(ALEMBIC_INI):
        raise RuntimeError(
            f"Alembic configuration not found at {ALEMBIC_INI}; "
            "run from a source checkout or install with pip install -e ."
        )

    # Run alembic upgrade from the backend directory
    subprocess.run(
        ["alembic", "-x", f"db_path={DATABASE_PATH}", "upgrade", "head"],
        cwd=BACKEND_DIR,
        check=True
    )

def _row_to_todo(row) -> Todo:
    """Convert a database row to a Todo model."""
    return Todo(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        due_date=row["due_date"],
        priority=row["priority"],
        category=row["category"],
        completed=bool(row["completed"]),
        created_at=row["created_at"],
    )

def get_all_todos() -> list[Todo]:
    with get_db() as conn:
        rows = conn.execute("SELECT * FROM todos ORDER BY created_at, rowid").fetchall()
        return [_row_to_todo(row) for row in rows]

def get_todo_db(todo_id: str) -> Optional[Todo]:
    with get_db() as conn:
        row = conn.execute("SELECT * FROM todos WHERE id = ?", (todo_id,)).fetchone()
        if row:
            return _row_to_todo(row)
    return None

def create_todo_db(
    todo_id: str,
    title: str,
    description: Optional[str] = None,
    due_date: Optional[str] = None,
    priority: str = DEFAULT_PRIORITY,
    category: str = DEFAULT_CATEGORY,
) -> Todo:
    """Create a todo. due_date can be YYYY-MM-DD or YYYY-MM-DD HH:MM format."""
    created_at = datetime.now().isoformat()

    with get_db() as conn:
        conn.execute(
            """INSERT INTO todos
               (id, title, description, due_date, priority, category, completed, created_at)
               VALUES (?, ?, ?, ?, ?, ?, 0, ?)""",
            (todo_id, title, description, due_date, priority, category, created_at)
        )
        conn.commit()

    return Todo(
        id=todo_id,
        title=title,
        description=description,
        due_date=due_date,
        priority=priority,
        category=category,
        completed=False,
        created_at=created_at,
    )

def update_todo_db(todo_id: str, **updates) -> Optional[Todo]:
    """
    Update a todo with any fields provided.
    Only updates fields that differ from current values.

    Args:
        todo_id: Todo ID to update
        **updates: Field names and values to update (title, description, due_date, priority, category, completed)
    """
    with get_db() as conn:
        row = conn.execute("SELECT * FROM todos WHERE id = ?", (todo_id,)).fetchone()
        if not row:
            return None

        keys = row.keys()

        # Filter updates: only include fields that differ from current values
        changes = {}
        for field, new_value in updates.items():
            if field not in keys or field in ("id", "created_at"):
                continue

            # SQLite stores booleans as integers
            if isinstance(new_value, bool):
                new_value = int(new_value)

            if new_value != row[field]:
                changes[field] = new_value

        if changes:
            set_clause = ", ".join(f"{field} = ?" for field in changes.keys())
            values = list(changes.values()) + [todo_id]
            conn.execute(f"UPDATE todos SET {set_clause} WHERE id = ?", values)
            conn.commit()

        # Return updated todo (re-fetch to get current state)
        updated_row = conn.execute("SELECT * FROM todos WHERE id = ?", (todo_id,)).fetchone()
        return _row_to_todo(updated_row)

def delete_todo_db(todo_id: str) -> bool:
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM todos WHERE id = ?", (todo_id,))
        conn.commit()
        return cursor.rowcount > 0
