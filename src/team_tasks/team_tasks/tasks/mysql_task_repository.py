from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import Role, SubmissionStatus, TaskPriority, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from ..uploads.storage import StoredFile
from .model import Assignee, Attachment, Submission, Task
from .repository import TaskRepository

_TASK_COLUMNS = "t.id, t.title, t.description, t.assigned_by, t.due_date, t.priority, t.status, t.created_at, t.updated_at"


def _row_to_task(r: dict) -> Task:
    return Task(
        id=int(r["id"]),
        title=r["title"],
        description=r.get("description") or "",
        assigned_by=int(r["assigned_by"]),
        due_date=r["due_date"],
        priority=TaskPriority(r["priority"]),
        status=TaskStatus(r["status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        assigned_by_name=r.get("assigned_by_name"),
    )


def _row_to_submission(r: dict) -> Submission:
    return Submission(
        id=int(r["id"]),
        task_id=int(r["task_id"]),
        submitted_by=int(r["submitted_by"]),
        submission_text=r.get("submission_text") or "",
        status=SubmissionStatus(r["status"]),
        submitted_at=r.get("submitted_at"),
        file_path=r.get("file_path"),
        file_name=r.get("file_name"),
        manager_feedback=r.get("manager_feedback"),
        reviewed_at=r.get("reviewed_at"),
        submitted_by_name=r.get("submitted_by_name"),
    )


def _insert_assignees(cur, task_id: int, assignee_ids: Sequence[int]) -> None:
    for position, user_id in enumerate(assignee_ids):
        cur.execute(
            "INSERT INTO task_assignees(task_id, user_id, position) VALUES(%s,%s,%s)",
            (int(task_id), int(user_id), position),
        )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def valid_assignee_ids(self, *, team_id: int, user_ids: Sequence[int]) -> set[int]:
        if not user_ids:
            return set()
        ids = [int(i) for i in user_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id FROM users
                WHERE id IN ({placeholders(ids)}) AND team_id=%s AND role=%s
                """,
                tuple(ids + [int(team_id), Role.EMPLOYEE.value]),
            )
            return {int(r["id"]) for r in fetchall(cur)}

    def create(
        self,
        *,
        assigned_by: int,
        title: str,
        description: str,
        due_date: date,
        priority: TaskPriority,
        assignee_ids: Sequence[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(title, description, assigned_by, due_date, priority, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (title, description, int(assigned_by), due_date, priority.value, TaskStatus.PENDING.value),
            )
            task_id = int(cur.lastrowid)
            _insert_assignees(cur, task_id, assignee_ids)
            return task_id

    def get(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TASK_COLUMNS}, u.name AS assigned_by_name
                FROM tasks t
                LEFT JOIN users u ON u.id = t.assigned_by
                WHERE t.id=%s
                """,
                (int(task_id),),
            )
            r = fetchone(cur)
            return _row_to_task(r) if r else None

    def get_owned(self, task_id: int, *, manager_id: int) -> Optional[Task]:
        task = self.get(task_id)
        if task is None or task.assigned_by != int(manager_id):
            return None
        return task

    def update(
        self,
        *,
        task_id: int,
        title: str,
        description: str,
        due_date: date,
        priority: TaskPriority,
        assignee_ids: Sequence[int],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE tasks
                SET title=%s, description=%s, due_date=%s, priority=%s, updated_at=CURRENT_TIMESTAMP
                WHERE id=%s
                """,
                (title, description, due_date, priority.value, int(task_id)),
            )
            cur.execute("DELETE FROM task_assignees WHERE task_id=%s", (int(task_id),))
            _insert_assignees(cur, task_id, assignee_ids)

    def delete(self, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE wa FROM work_attachments wa
                JOIN task_submissions ts ON ts.id = wa.submission_id
                WHERE ts.task_id=%s
                """,
                (int(task_id),),
            )
            cur.execute("DELETE FROM task_submissions WHERE task_id=%s", (int(task_id),))
            cur.execute("DELETE FROM task_assignees WHERE task_id=%s", (int(task_id),))
            cur.execute("DELETE FROM tasks WHERE id=%s", (int(task_id),))
            return cur.rowcount > 0

    def is_assignee(self, task_id: int, *, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM task_assignees WHERE task_id=%s AND user_id=%s",
                (int(task_id), int(user_id)),
            )
            return fetchone(cur) is not None

    def set_status(self, task_id: int, status: TaskStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE tasks SET status=%s, updated_at=CURRENT_TIMESTAMP WHERE id=%s",
                (status.value, int(task_id)),
            )
            return cur.rowcount > 0

    def record_submission(
        self,
        *,
        task_id: int,
        user_id: int,
        submission_text: str,
        files: Sequence[StoredFile],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # LAST_INSERT_ID(id) makes lastrowid the existing row's id on update.
            cur.execute(
                """
                INSERT INTO task_submissions(task_id, submitted_by, submission_text, status)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    id=LAST_INSERT_ID(id),
                    submission_text=VALUES(submission_text),
                    status=VALUES(status),
                    submitted_at=CURRENT_TIMESTAMP
                """,
                (int(task_id), int(user_id), submission_text, SubmissionStatus.SUBMITTED.value),
            )
            submission_id = int(cur.lastrowid)

            for f in files:
                cur.execute(
                    """
                    INSERT INTO work_attachments(submission_id, file_name, file_path, file_type, file_size)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (submission_id, f.original_name, f.path, f.mime_type, int(f.size)),
                )

            if files:
                cur.execute(
                    "UPDATE task_submissions SET file_path=%s, file_name=%s WHERE id=%s",
                    (files[0].path, files[0].original_name, submission_id),
                )

            cur.execute(
                "UPDATE tasks SET status=%s, updated_at=CURRENT_TIMESTAMP WHERE id=%s",
                (TaskStatus.COMPLETED.value, int(task_id)),
            )
            return submission_id

    def get_submission(self, submission_id: int) -> Optional[Submission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ts.*, u.name AS submitted_by_name
                FROM task_submissions ts
                JOIN users u ON u.id = ts.submitted_by
                WHERE ts.id=%s
                """,
                (int(submission_id),),
            )
            r = fetchone(cur)
            return _row_to_submission(r) if r else None

    def review_submission(self, *, submission_id: int, status: SubmissionStatus, feedback: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE task_submissions
                SET status=%s, manager_feedback=%s, reviewed_at=CURRENT_TIMESTAMP
                WHERE id=%s
                """,
                (status.value, feedback, int(submission_id)),
            )
            return cur.rowcount > 0

    def list_by_manager(self, manager_id: int) -> list[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TASK_COLUMNS}, u.name AS assigned_by_name
                FROM tasks t
                LEFT JOIN users u ON u.id = t.assigned_by
                WHERE t.assigned_by=%s
                ORDER BY t.created_at DESC, t.id DESC
                """,
                (int(manager_id),),
            )
            return [_row_to_task(r) for r in fetchall(cur)]

    def list_by_assignee(self, user_id: int) -> list[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TASK_COLUMNS}, u.name AS assigned_by_name
                FROM task_assignees ta
                JOIN tasks t ON t.id = ta.task_id
                LEFT JOIN users u ON u.id = t.assigned_by
                WHERE ta.user_id=%s
                ORDER BY t.created_at DESC, t.id DESC
                """,
                (int(user_id),),
            )
            return [_row_to_task(r) for r in fetchall(cur)]

    def assignees_for(self, task_ids: Iterable[int]) -> dict[int, list[Assignee]]:
        ids = sorted({int(i) for i in task_ids})
        out: dict[int, list[Assignee]] = {i: [] for i in ids}
        if not ids:
            return out
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ta.task_id, ta.position, u.id AS user_id, u.name, u.email
                FROM task_assignees ta
                JOIN users u ON u.id = ta.user_id
                WHERE ta.task_id IN ({placeholders(ids)})
                ORDER BY ta.task_id, ta.position
                """,
                tuple(ids),
            )
            for r in fetchall(cur):
                out[int(r["task_id"])].append(
                    Assignee(user_id=int(r["user_id"]), name=r["name"], email=r["email"], position=int(r["position"]))
                )
        return out

    def submissions_for(self, task_ids: Iterable[int], *, submitted_by: Optional[int] = None) -> dict[int, list[Submission]]:
        ids = sorted({int(i) for i in task_ids})
        out: dict[int, list[Submission]] = {i: [] for i in ids}
        if not ids:
            return out

        clauses = [f"ts.task_id IN ({placeholders(ids)})"]
        params: list[object] = list(ids)
        if submitted_by is not None:
            clauses.append("ts.submitted_by=%s")
            params.append(int(submitted_by))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ts.*, u.name AS submitted_by_name
                FROM task_submissions ts
                JOIN users u ON u.id = ts.submitted_by
                WHERE {" AND ".join(clauses)}
                ORDER BY ts.submitted_at DESC
                """,
                tuple(params),
            )
            submissions = [_row_to_submission(r) for r in fetchall(cur)]

            attachments: dict[int, list[Attachment]] = {s.id: [] for s in submissions}
            if submissions:
                sub_ids = list(attachments)
                cur.execute(
                    f"""
                    SELECT id, submission_id, file_name, file_path, file_type, file_size
                    FROM work_attachments
                    WHERE submission_id IN ({placeholders(sub_ids)})
                    ORDER BY id
                    """,
                    tuple(sub_ids),
                )
                for r in fetchall(cur):
                    attachments[int(r["submission_id"])].append(
                        Attachment(
                            id=int(r["id"]),
                            file_name=r["file_name"],
                            file_path=r["file_path"],
                            file_type=r["file_type"],
                            file_size=int(r["file_size"]),
                        )
                    )

        for s in submissions:
            out[s.task_id].append(replace(s, attachments=tuple(attachments.get(s.id, []))))
        return out
