from __future__ import annotations

from typing import Optional

from ..core.enums import Role, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import TeamOverviewRepository

# Per-employee task counts go through the assignee set, not a single owner column.
_TASK_COUNT = """
    (SELECT COUNT(*) FROM task_assignees ta JOIN tasks t ON t.id = ta.task_id
     WHERE ta.user_id = u.id{extra})
"""


def _task_count(status: Optional[TaskStatus] = None) -> str:
    extra = f" AND t.status = '{status.value}'" if status else ""
    return _TASK_COUNT.format(extra=extra)


class MySQLTeamOverviewRepository(TeamOverviewRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def members(self, team_id: int) -> list[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    u.id, u.name, u.email, u.created_at AS join_date, u.is_active,
                    {_task_count()} AS total_tasks,
                    {_task_count(TaskStatus.COMPLETED)} AS completed_tasks,
                    (SELECT COUNT(*) FROM daily_work_logs d WHERE d.user_id = u.id) AS work_entries,
                    (SELECT COALESCE(SUM(d.hours_worked), 0) FROM daily_work_logs d WHERE d.user_id = u.id) AS total_hours
                FROM users u
                WHERE u.team_id=%s AND u.role=%s
                ORDER BY u.name ASC
                """,
                (int(team_id), Role.EMPLOYEE.value),
            )
            return [
                {
                    "id": int(r["id"]),
                    "name": r["name"],
                    "email": r["email"],
                    "join_date": r.get("join_date"),
                    "is_active": bool(r["is_active"]),
                    "total_tasks": int(r["total_tasks"] or 0),
                    "completed_tasks": int(r["completed_tasks"] or 0),
                    "work_entries": int(r["work_entries"] or 0),
                    "total_hours": float(r["total_hours"] or 0),
                }
                for r in fetchall(cur)
            ]

    def active_members(self, team_id: int) -> list[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, email FROM users
                WHERE team_id=%s AND role=%s AND is_active=1
                ORDER BY name ASC
                """,
                (int(team_id), Role.EMPLOYEE.value),
            )
            return [{"id": int(r["id"]), "name": r["name"], "email": r["email"]} for r in fetchall(cur)]

    def totals(self, *, team_id: int, manager_id: int) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total_members FROM users WHERE team_id=%s AND role=%s",
                (int(team_id), Role.EMPLOYEE.value),
            )
            members = fetchone(cur) or {}

            cur.execute(
                """
                SELECT
                    COUNT(*) AS total_tasks,
                    COALESCE(SUM(status = 'completed'), 0) AS completed_tasks,
                    COALESCE(SUM(status = 'in_progress'), 0) AS in_progress_tasks,
                    COALESCE(SUM(status = 'pending'), 0) AS pending_tasks
                FROM tasks
                WHERE assigned_by=%s
                """,
                (int(manager_id),),
            )
            tasks = fetchone(cur) or {}

            cur.execute(
                """
                SELECT COUNT(*) AS total_work_entries, COALESCE(SUM(d.hours_worked), 0) AS total_hours_logged
                FROM daily_work_logs d
                JOIN users u ON u.id = d.user_id
                WHERE u.team_id=%s AND u.role=%s
                """,
                (int(team_id), Role.EMPLOYEE.value),
            )
            work = fetchone(cur) or {}

        return {
            "total_members": int(members.get("total_members") or 0),
            "total_tasks": int(tasks.get("total_tasks") or 0),
            "completed_tasks": int(tasks.get("completed_tasks") or 0),
            "in_progress_tasks": int(tasks.get("in_progress_tasks") or 0),
            "pending_tasks": int(tasks.get("pending_tasks") or 0),
            "total_work_entries": int(work.get("total_work_entries") or 0),
            "total_hours_logged": float(work.get("total_hours_logged") or 0),
        }

    def recent_tasks(self, *, manager_id: int, limit: int) -> list[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT t.title AS description, u.name AS user_name, t.created_at AS activity_date
                FROM tasks t
                LEFT JOIN task_assignees ta ON ta.task_id = t.id AND ta.position = 0
                LEFT JOIN users u ON u.id = ta.user_id
                WHERE t.assigned_by=%s
                ORDER BY t.created_at DESC
                LIMIT %s
                """,
                (int(manager_id), int(limit)),
            )
            return [dict(r, type="task") for r in fetchall(cur)]

    def recent_work_logs(self, *, team_id: int, limit: int) -> list[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT CONCAT('Logged work: ', d.project_name) AS description,
                       u.name AS user_name, d.created_at AS activity_date
                FROM daily_work_logs d
                JOIN users u ON u.id = d.user_id
                WHERE u.team_id=%s AND u.role=%s
                ORDER BY d.created_at DESC
                LIMIT %s
                """,
                (int(team_id), Role.EMPLOYEE.value, int(limit)),
            )
            return [dict(r, type="work_log") for r in fetchall(cur)]

    def performance_rows(self, team_id: int) -> list[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    u.id, u.name, u.email,
                    {_task_count()} AS total_tasks,
                    {_task_count(TaskStatus.COMPLETED)} AS completed_tasks,
                    {_task_count(TaskStatus.IN_PROGRESS)} AS in_progress_tasks,
                    {_task_count(TaskStatus.PENDING)} AS pending_tasks,
                    (SELECT COALESCE(AVG(d.hours_worked), 0) FROM daily_work_logs d WHERE d.user_id = u.id) AS avg_daily_hours,
                    (SELECT COUNT(DISTINCT d.work_date) FROM daily_work_logs d WHERE d.user_id = u.id) AS active_days
                FROM users u
                WHERE u.team_id=%s AND u.role=%s
                """,
                (int(team_id), Role.EMPLOYEE.value),
            )
            return [
                {
                    "id": int(r["id"]),
                    "name": r["name"],
                    "email": r["email"],
                    "total_tasks": int(r["total_tasks"] or 0),
                    "completed_tasks": int(r["completed_tasks"] or 0),
                    "in_progress_tasks": int(r["in_progress_tasks"] or 0),
                    "pending_tasks": int(r["pending_tasks"] or 0),
                    "avg_daily_hours": round(float(r["avg_daily_hours"] or 0), 2),
                    "active_days": int(r["active_days"] or 0),
                }
                for r in fetchall(cur)
            ]

    def is_team_employee(self, *, team_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM users WHERE id=%s AND team_id=%s AND role=%s",
                (int(user_id), int(team_id), Role.EMPLOYEE.value),
            )
            return fetchone(cur) is not None

    def set_active(self, user_id: int, *, is_active: bool) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET is_active=%s, updated_at=CURRENT_TIMESTAMP WHERE id=%s",
                (1 if is_active else 0, int(user_id)),
            )

    def info(self, team_id: int) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    t.id, t.team_name, t.manager_code, t.created_at,
                    u.name AS manager_name, u.email AS manager_email,
                    (SELECT COUNT(*) FROM users m
                     WHERE m.team_id = t.id AND m.role = 'employee' AND m.is_active = 1) AS member_count
                FROM teams t
                JOIN users u ON u.id = t.manager_id
                WHERE t.id=%s
                """,
                (int(team_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return dict(r, id=int(r["id"]), member_count=int(r["member_count"] or 0))
