from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..core.constants import UQ_DAILY_WORK_USER_DATE
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders, translate_duplicates
from ..tasks.model import Attachment
from ..uploads.storage import StoredFile
from .model import DailyWorkFields, DailyWorkLog
from .repository import DailyWorkRepository

_LOG_COLUMNS = """
    d.id, d.user_id, d.work_date, d.work_description, d.hours_worked, d.project_name,
    d.work_category, d.mood_rating, d.challenges_faced, d.achievements, d.created_at, d.updated_at
"""


def _row_to_log(r: dict) -> DailyWorkLog:
    return DailyWorkLog(
        id=int(r["id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        work_description=r["work_description"],
        hours_worked=float(r.get("hours_worked") or 0),
        project_name=r.get("project_name") or "",
        work_category=r.get("work_category") or "",
        mood_rating=r.get("mood_rating") or "neutral",
        challenges_faced=r.get("challenges_faced") or "",
        achievements=r.get("achievements") or "",
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee_name=r.get("employee_name"),
        employee_email=r.get("employee_email"),
    )


class MySQLDailyWorkRepository(DailyWorkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_for_date(self, *, user_id: int, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM daily_work_logs WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            return fetchone(cur) is not None

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        fields: DailyWorkFields,
        files: Sequence[StoredFile] = (),
    ) -> int:
        with translate_duplicates([UQ_DAILY_WORK_USER_DATE]):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO daily_work_logs(
                        user_id, work_date, work_description, hours_worked,
                        project_name, work_category, mood_rating, challenges_faced, achievements
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        work_date,
                        fields.work_description,
                        fields.hours_worked,
                        fields.project_name,
                        fields.work_category,
                        fields.mood_rating,
                        fields.challenges_faced,
                        fields.achievements,
                    ),
                )
                entry_id = int(cur.lastrowid)

                for f in files:
                    cur.execute(
                        """
                        INSERT INTO work_attachments(daily_work_id, file_name, file_path, file_type, file_size)
                        VALUES(%s,%s,%s,%s,%s)
                        """,
                        (entry_id, f.original_name, f.path, f.mime_type, int(f.size)),
                    )
                return entry_id

    def get(self, entry_id: int) -> Optional[DailyWorkLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LOG_COLUMNS} FROM daily_work_logs d WHERE d.id=%s", (int(entry_id),))
            r = fetchone(cur)
        if not r:
            return None
        return self._with_attachments([_row_to_log(r)])[0]

    def get_owned(self, entry_id: int, *, user_id: int) -> Optional[DailyWorkLog]:
        entry = self.get(entry_id)
        if entry is None or entry.user_id != int(user_id):
            return None
        return entry

    def update(self, entry_id: int, *, fields: DailyWorkFields) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE daily_work_logs
                SET work_description=%s, hours_worked=%s, project_name=%s,
                    work_category=%s, mood_rating=%s, challenges_faced=%s,
                    achievements=%s, updated_at=CURRENT_TIMESTAMP
                WHERE id=%s
                """,
                (
                    fields.work_description,
                    fields.hours_worked,
                    fields.project_name,
                    fields.work_category,
                    fields.mood_rating,
                    fields.challenges_faced,
                    fields.achievements,
                    int(entry_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_attachments WHERE daily_work_id=%s", (int(entry_id),))
            cur.execute("DELETE FROM daily_work_logs WHERE id=%s", (int(entry_id),))
            return cur.rowcount > 0

    def list_for_user(self, user_id: int) -> list[DailyWorkLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LOG_COLUMNS}
                FROM daily_work_logs d
                WHERE d.user_id=%s
                ORDER BY d.work_date DESC
                """,
                (int(user_id),),
            )
            logs = [_row_to_log(r) for r in fetchall(cur)]
        return self._with_attachments(logs)

    def list_for_team(self, team_id: int) -> list[DailyWorkLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LOG_COLUMNS}, u.name AS employee_name, u.email AS employee_email
                FROM daily_work_logs d
                JOIN users u ON u.id = d.user_id
                WHERE u.team_id=%s AND u.role=%s
                ORDER BY d.work_date DESC, u.name ASC
                """,
                (int(team_id), Role.EMPLOYEE.value),
            )
            logs = [_row_to_log(r) for r in fetchall(cur)]
        return self._with_attachments(logs)

    def _with_attachments(self, logs: list[DailyWorkLog]) -> list[DailyWorkLog]:
        if not logs:
            return logs
        ids = [log.id for log in logs]
        by_log: dict[int, list[Attachment]] = {i: [] for i in ids}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, daily_work_id, file_name, file_path, file_type, file_size
                FROM work_attachments
                WHERE daily_work_id IN ({placeholders(ids)})
                ORDER BY id
                """,
                tuple(ids),
            )
            for r in fetchall(cur):
                by_log[int(r["daily_work_id"])].append(
                    Attachment(
                        id=int(r["id"]),
                        file_name=r["file_name"],
                        file_path=r["file_path"],
                        file_type=r["file_type"],
                        file_size=int(r["file_size"]),
                    )
                )
        return [replace(log, attachments=tuple(by_log[log.id])) for log in logs]

    def stats_for_user(self, user_id: int) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COUNT(*) AS total_entries,
                    COALESCE(SUM(hours_worked), 0) AS total_hours,
                    COALESCE(AVG(hours_worked), 0) AS avg_hours_per_day,
                    COUNT(DISTINCT NULLIF(project_name, '')) AS projects_worked
                FROM daily_work_logs
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur) or {}
        return {
            "total_entries": int(r.get("total_entries") or 0),
            "total_hours": round(float(r.get("total_hours") or 0), 2),
            "avg_hours_per_day": round(float(r.get("avg_hours_per_day") or 0), 2),
            "projects_worked": int(r.get("projects_worked") or 0),
        }
