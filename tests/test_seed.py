from unittest.mock import patch

from tracker.db.seed import ADMIN_EMAIL, run_seed
from tracker.modules import DocumentationSection, Task, TaskAssignment, TaskStatus, User, UserRole

from .conftest import PASSWORD_HASH


def test_seed_populates_demo_data(db):
    # Skip real bcrypt rounds
    with patch("tracker.db.seed.hash_password", return_value=PASSWORD_HASH):
        summary = run_seed(db, user_count=4, task_count=6, seed=42)

    assert summary["users"] == 5
    assert summary["tasks"] == 6
    assert db.query(User).filter(User.role == UserRole.ADMIN).one().email == ADMIN_EMAIL
    assert db.query(Task).count() == 6
    assert db.query(DocumentationSection).count() == summary["sections"]

    # Tasks with assignees are never left unassigned
    for task in db.query(Task).all():
        assigned = db.query(TaskAssignment).filter(TaskAssignment.task_id == task.id).count()
        assert (task.status == TaskStatus.UNASSIGNED) == (assigned == 0)
