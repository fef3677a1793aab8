from __future__ import annotations
import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

from smartflow.models.conditions import ConditionGroup
from smartflow.models.template import Conditions, Screen, Template, TemplateField
from smartflow.rules.serde import serialize_conditions

DB_NAME = "smartflow.sqlite3"

def db_path(data_dir: Path) -> Path:
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / DB_NAME

def connect(data_dir: Path) -> sqlite3.Connection:
    path = db_path(data_dir)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn

def init_schema(conn: sqlite3.Connection) -> None:
    cur = conn.cursor()

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS templates (
            template_id TEXT PRIMARY KEY,
            name TEXT NOT NULL
        );
        """
    )

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS screens (
            template_id TEXT NOT NULL,
            screen_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT,
            type TEXT NOT NULL DEFAULT 'standard',
            position INTEGER NOT NULL,
            conditions_json TEXT,
            PRIMARY KEY (template_id, screen_id),
            FOREIGN KEY (template_id) REFERENCES templates(template_id) ON DELETE CASCADE
        );
        """
    )

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS fields (
            template_id TEXT NOT NULL,
            screen_id TEXT NOT NULL,
            name TEXT NOT NULL,
            label TEXT NOT NULL,
            type TEXT NOT NULL,
            required INTEGER NOT NULL DEFAULT 0,
            position INTEGER NOT NULL,
            conditions_json TEXT,
            FOREIGN KEY (template_id, screen_id)
                REFERENCES screens(template_id, screen_id) ON DELETE CASCADE
        );
        """
    )

    conn.commit()

def _conditions_json(conditions: Conditions) -> Optional[str]:
    # Text is stored untouched, even if it doesn't parse
    if isinstance(conditions, ConditionGroup):
        return serialize_conditions(conditions)
    if isinstance(conditions, dict):
        return json.dumps(conditions, default=str)
    return conditions or None

def save_template(conn: sqlite3.Connection, template: Template) -> None:
    """Insert or replace a template together with all of its screens and fields."""
    with conn:
        conn.execute(
            """
            INSERT INTO templates(template_id, name)
            VALUES (?, ?)
            ON CONFLICT(template_id) DO UPDATE SET
                name=excluded.name
            """,
            (template.id, template.name),
        )
        conn.execute("DELETE FROM screens WHERE template_id = ?", (template.id,))

        for s in template.screens:
            conn.execute(
                """
                INSERT INTO screens(
                    template_id, screen_id, title, description, type, position, conditions_json
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    template.id,
                    s.id,
                    s.title,
                    s.description,
                    s.type,
                    s.order,
                    _conditions_json(s.conditions),
                ),
            )
            for f in s.fields:
                conn.execute(
                    """
                    INSERT INTO fields(
                        template_id, screen_id, name, label, type, required, position, conditions_json
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        template.id,
                        s.id,
                        f.name,
                        f.label,
                        f.type,
                        int(f.required),
                        f.order,
                        _conditions_json(f.conditions),
                    ),
                )

def load_template(conn: sqlite3.Connection, template_id: str) -> Optional[Template]:
    row = conn.execute(
        "SELECT template_id, name FROM templates WHERE template_id = ?",
        (template_id,),
    ).fetchone()
    if not row:
        return None

    field_rows: Dict[str, List[TemplateField]] = {}
    for f in conn.execute(
        """
        SELECT * FROM fields
        WHERE template_id = ?
        ORDER BY screen_id, position
        """,
        (template_id,),
    ):
        field_rows.setdefault(f["screen_id"], []).append(
            TemplateField(
                name=f["name"],
                label=f["label"],
                type=f["type"],
                required=bool(f["required"]),
                order=f["position"],
                conditions=f["conditions_json"],
            )
        )

    screens = [
        Screen(
            id=s["screen_id"],
            title=s["title"],
            description=s["description"],
            type=s["type"],
            order=s["position"],
            conditions=s["conditions_json"],
            fields=field_rows.get(s["screen_id"], []),
        )
        for s in conn.execute(
            "SELECT * FROM screens WHERE template_id = ? ORDER BY position",
            (template_id,),
        )
    ]

    return Template(id=row["template_id"], name=row["name"], screens=screens)

def list_templates(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT t.template_id, t.name, COUNT(s.screen_id) AS screen_count
        FROM templates t
        LEFT JOIN screens s ON s.template_id = t.template_id
        GROUP BY t.template_id, t.name
        ORDER BY t.template_id
        """
    ).fetchall()
    return [dict(r) for r in rows]

def delete_template(conn: sqlite3.Connection, template_id: str) -> bool:
    with conn:
        cur = conn.execute("DELETE FROM templates WHERE template_id = ?", (template_id,))
    return cur.rowcount > 0
