from collections import Counter
from sqlalchemy.orm import Session
from tracker.modules.auth.model import User
from tracker.modules.tasks.model import Task, TaskAssignment, TaskStatus


def completion_rate(completed: int, total: int) -> int:
    return round(completed / total * 100) if total else 0


def user_metrics(db: Session) -> list[dict]:
    """Per-user counts of assigned tasks by status, ordered by first name."""
    users = db.query(User).order_by(User.first_name, User.id).all()

    rows = (
        db.query(TaskAssignment.user_id, Task.status)
        .join(Task, Task.id == TaskAssignment.task_id)
        .all()
    )
    per_user: dict[int, Counter] = {}
    for user_id, task_status in rows:
        per_user.setdefault(user_id, Counter())[task_status] += 1

    metrics = []
    for user in users:
        counts = per_user.get(user.id, Counter())
        total = sum(counts.values())
        completed = counts[TaskStatus.COMPLETED]
        metrics.append({
            "id": user.id,
            "name": user.full_name,
            "email": user.email,
            "role": user.role,
            "total_tasks": total,
            "completed_tasks": completed,
            "in_progress_tasks": counts[TaskStatus.IN_PROGRESS],
            "pending_tasks": counts[TaskStatus.PENDING],
            "completion_rate": completion_rate(completed, total),
        })
    return metrics


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.first_name, User.id).all()
