"""RuleDatabase: SQLite-backed project, rule and global-rule store."""

from __future__ import annotations

import sqlite3
import threading

from rulemcp.errors import (
    AppError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnprocessableError,
)
from rulemcp.rule_engine.models import GlobalRule, Project, Rule
from rulemcp.store.schema import run_migrations

_RULE_COLUMNS = "rule_id, name, description, type, severity, pattern, message, is_active"


def _map_integrity_error(err: sqlite3.IntegrityError) -> AppError:
    text = str(err)
    if "UNIQUE" in text or "PRIMARY KEY" in text:
        return ConflictError("Unique constraint violated", details={"reason": text})
    if "FOREIGN KEY" in text:
        return UnprocessableError("Related record does not exist")
    return InternalError(text)


class RuleDatabase:
    """Implements ProjectStore and RuleStore over one SQLite connection.

    The connection is shared between worker threads, so every statement runs
    under ``self._lock``.
    """

    def __init__(self, path: str = ":memory:") -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        run_migrations(self._conn)

    def close(self) -> None:
        self._conn.close()

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    # -- ProjectStore ---------------------------------------------------

    def get_by_id(self, project_id: str) -> Project:
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM projects WHERE project_id = ?", (project_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError(f"Project '{project_id}' not found")
        return self._row_to_project(row)

    def get_by_language(self, language: str) -> list[Project]:
        with self._lock:
            rows = self._conn.execute(
                """SELECT * FROM projects WHERE language = ?
                   ORDER BY created_at DESC, project_id ASC""",
                (language,),
            ).fetchall()
        return [self._row_to_project(row) for row in rows]

    def create_project(self, project: Project) -> None:
        try:
            with self._lock:
                self._conn.execute(
                    """INSERT INTO projects
                       (project_id, name, description, language, apply_global_rules,
                        created_at, updated_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?)""",
                    (
                        project.project_id,
                        project.name,
                        project.description,
                        project.language,
                        int(project.apply_global_rules),
                        project.created_at.isoformat(),
                        project.updated_at.isoformat(),
                    ),
                )
                self._conn.commit()
        except sqlite3.IntegrityError as e:
            raise _map_integrity_error(e) from e

    # -- RuleStore ------------------------------------------------------

    def get_by_project_id(self, project_id: str) -> list[Rule]:
        with self._lock:
            rows = self._conn.execute(
                f"""SELECT project_id, {_RULE_COLUMNS} FROM rules
                    WHERE project_id = ? AND is_active = 1
                    ORDER BY severity DESC, name ASC""",
                (project_id,),
            ).fetchall()
        return [
            Rule(
                project_id=row["project_id"],
                rule_id=row["rule_id"],
                name=row["name"],
                description=row["description"],
                type=row["type"],
                severity=row["severity"],
                pattern=row["pattern"],
                message=row["message"],
                is_active=bool(row["is_active"]),
            )
            for row in rows
        ]

    def save_rule(self, rule: Rule) -> None:
        """Insert or update (on (project_id, rule_id) conflict) a project rule."""
        try:
            with self._lock:
                self._conn.execute(
                    f"""INSERT INTO rules (project_id, {_RULE_COLUMNS})
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                        ON CONFLICT(project_id, rule_id) DO UPDATE SET
                         name=excluded.name, description=excluded.description,
                         type=excluded.type, severity=excluded.severity,
                         pattern=excluded.pattern, message=excluded.message,
                         is_active=excluded.is_active,
                         updated_at=strftime('%Y-%m-%dT%H:%M:%fZ', 'now')""",
                    (rule.project_id, *self._rule_values(rule)),
                )
                self._conn.commit()
        except sqlite3.IntegrityError as e:
            raise _map_integrity_error(e) from e

    # -- GlobalRuleStore ------------------------------------------------

    def get_global_rules(self, language: str) -> list[GlobalRule]:
        with self._lock:
            rows = self._conn.execute(
                f"""SELECT language, {_RULE_COLUMNS} FROM global_rules
                    WHERE language = ? AND is_active = 1
                    ORDER BY severity DESC, name ASC""",
                (language,),
            ).fetchall()
        return [
            GlobalRule(
                language=row["language"],
                rule_id=row["rule_id"],
                name=row["name"],
                description=row["description"],
                type=row["type"],
                severity=row["severity"],
                pattern=row["pattern"],
                message=row["message"],
                is_active=bool(row["is_active"]),
            )
            for row in rows
        ]

    def save_global_rule(self, rule: GlobalRule) -> None:
        """Insert or update (on (language, rule_id) conflict) a global rule."""
        try:
            with self._lock:
                self._conn.execute(
                    f"""INSERT INTO global_rules (language, {_RULE_COLUMNS})
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                        ON CONFLICT(language, rule_id) DO UPDATE SET
                         name=excluded.name, description=excluded.description,
                         type=excluded.type, severity=excluded.severity,
                         pattern=excluded.pattern, message=excluded.message,
                         is_active=excluded.is_active,
                         updated_at=strftime('%Y-%m-%dT%H:%M:%fZ', 'now')""",
                    (rule.language, *self._rule_values(rule)),
                )
                self._conn.commit()
        except sqlite3.IntegrityError as e:
            raise _map_integrity_error(e) from e

    def get_stats(self) -> dict:
        with self._lock:
            projects = self._conn.execute("SELECT COUNT(*) FROM projects").fetchone()[0]
            rules = self._conn.execute("SELECT COUNT(*) FROM rules").fetchone()[0]
            global_rules = self._conn.execute("SELECT COUNT(*) FROM global_rules").fetchone()[0]
        return {
            "total_projects": projects,
            "total_rules": rules,
            "total_global_rules": global_rules,
        }

    @staticmethod
    def _rule_values(rule: Rule | GlobalRule) -> tuple:
        return (
            rule.rule_id,
            rule.name,
            rule.description,
            rule.type,
            rule.severity,
            rule.pattern,
            rule.message,
            int(rule.is_active),
        )

    @staticmethod
    def _row_to_project(row: sqlite3.Row) -> Project:
        return Project(
            project_id=row["project_id"],
            name=row["name"],
            description=row["description"],
            language=row["language"],
            apply_global_rules=bool(row["apply_global_rules"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


class GlobalRuleView:
    """Adapts RuleDatabase to the GlobalRuleStore interface.

    ``get_by_language`` already means "projects by language" on the database
    itself, so global rules are exposed through this thin view.
    """

    def __init__(self, db: RuleDatabase) -> None:
        self._db = db

    def get_by_language(self, language: str) -> list[GlobalRule]:
        return self._db.get_global_rules(language)
