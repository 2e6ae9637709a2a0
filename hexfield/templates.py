"""
SQLite storage for named field layouts ("templates").

Schema:
    templates(id INTEGER PRIMARY KEY, name TEXT UNIQUE)
    template_fields(template_id, field_name, start_pos, length, ord)

Saving a template upserts its name and replaces all of its field rows in a
single transaction. Field order is kept through the `ord` column.
"""

import logging
import sqlite3
from pathlib import Path
from typing import List

from .fields import FieldDefinition, FieldRow, to_definition

logger = logging.getLogger(__name__)

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS templates ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT UNIQUE)",
    "CREATE TABLE IF NOT EXISTS template_fields ("
    "template_id INTEGER, field_name TEXT, start_pos INTEGER, length INTEGER, ord INTEGER, "
    "FOREIGN KEY(template_id) REFERENCES templates(id) ON DELETE CASCADE)",
)


class TemplateStoreError(RuntimeError):
    """The template database could not be opened, read or written."""


class TemplateNotFound(KeyError):
    def __init__(self, name):
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"Template not found: {self.name}"


class TemplateStore:
    def __init__(self, path="templates.db"):
        self.path = str(path)
        self._conn = None
        try:
            if self.path != ":memory:":
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.path)
            self._conn.execute("PRAGMA foreign_keys = ON")
            with self._conn:
                for statement in _SCHEMA:
                    self._conn.execute(statement)
        except (sqlite3.Error, OSError) as e:
            self.close()
            raise TemplateStoreError(f"Failed to open database {self.path}: {e}") from e
        logger.info("Template store opened at %s", self.path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _connection(self):
        if self._conn is None:
            raise TemplateStoreError("Template store is closed")
        return self._conn

    def list_names(self) -> List[str]:
        """All template names, sorted by name."""
        try:
            rows = self._connection().execute("SELECT name FROM templates ORDER BY name").fetchall()
        except sqlite3.Error as e:
            raise TemplateStoreError(f"Failed to list templates: {e}") from e
        return [r[0] for r in rows]

    def save(self, name, fields) -> int:
        """
        Store `fields` under `name`, replacing whatever was saved there before.

        `fields` may hold FieldDefinition or FieldRow objects; rows whose
        start or length is not an integer are not stored. Returns the number
        of fields written.
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("Template name is empty")

        to_store = []
        for field in fields:
            definition = to_definition(FieldRow(field.name, field.start, field.length))
            if definition is not None:
                to_store.append((definition.name, definition.start, definition.length))

        conn = self._connection()
        try:
            with conn:
                conn.execute("INSERT OR IGNORE INTO templates(name) VALUES(?)", (name,))
                template_id = conn.execute("SELECT id FROM templates WHERE name = ?", (name,)).fetchone()[0]
                conn.execute("DELETE FROM template_fields WHERE template_id = ?", (template_id,))
                conn.executemany(
                    "INSERT INTO template_fields(template_id, field_name, start_pos, length, ord) "
                    "VALUES(?, ?, ?, ?, ?)",
                    [(template_id, fname, start, length, ord_) for ord_, (fname, start, length) in enumerate(to_store)],
                )
        except sqlite3.Error as e:
            raise TemplateStoreError(f"Failed to save template {name!r}: {e}") from e

        logger.info("Saved template %r with %d fields", name, len(to_store))
        return len(to_store)

    def load(self, name) -> List[FieldDefinition]:
        conn = self._connection()
        try:
            row = conn.execute("SELECT id FROM templates WHERE name = ?", (name,)).fetchone()
            if row is None:
                raise TemplateNotFound(name)
            rows = conn.execute(
                "SELECT field_name, start_pos, length FROM template_fields WHERE template_id = ? ORDER BY ord",
                (row[0],),
            ).fetchall()
        except sqlite3.Error as e:
            raise TemplateStoreError(f"Failed to load template {name!r}: {e}") from e
        return [FieldDefinition(fname, start, length) for fname, start, length in rows]

    def delete(self, name) -> bool:
        """Remove a template and its fields. Returns False if it did not exist."""
        conn = self._connection()
        try:
            with conn:
                cur = conn.execute("DELETE FROM templates WHERE name = ?", (name,))
        except sqlite3.Error as e:
            raise TemplateStoreError(f"Failed to delete template {name!r}: {e}") from e
        if cur.rowcount:
            logger.info("Deleted template %r", name)
        return cur.rowcount > 0

    def __contains__(self, name):
        try:
            row = self._connection().execute("SELECT 1 FROM templates WHERE name = ?", (name,)).fetchone()
        except sqlite3.Error as e:
            raise TemplateStoreError(f"Failed to look up template {name!r}: {e}") from e
        return row is not None
