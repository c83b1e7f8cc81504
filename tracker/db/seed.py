"""
Seed script: populates the DB with demo data.
Run: python -m tracker.db.seed
"""
import random
from typing import Optional
from faker import Faker
from sqlalchemy.orm import Session
from tracker.db.session import SessionLocal
from tracker.core.security import hash_password
# Ensure all models are imported so relationships work
from tracker.modules import (
    User,
    UserRole,
    Task,
    TaskAssignment,
    TaskLink,
    TaskStatus,
    LinkType,
    TaskComment,
    DocumentationSection,
    DocumentationPage,
)

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Admin@123"
USER_PASSWORD = "User@123"

DOC_SECTIONS = [
    ("Getting Started", "getting-started"),
    ("Plugins", "plugins"),
    ("Deployment", "deployment"),
]


def run_seed(
    db: Optional[Session] = None,
    user_count: int = 8,
    task_count: int = 20,
    seed: Optional[int] = None,
) -> dict:
    fake = Faker()
    rng = random.Random(seed)
    if seed is not None:
        Faker.seed(seed)

    own_session = db is None
    db = db or SessionLocal()
    try:
        print("🚀 Starting Database Seed...")

        # 1. Admin + users
        admin = User(
            first_name="Alice",
            last_name="Admin",
            email=ADMIN_EMAIL,
            hashed_password=hash_password(ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            is_active=True,
        )
        db.add(admin)

        user_hash = hash_password(USER_PASSWORD)
        users = []
        for _ in range(user_count):
            user = User(
                first_name=fake.first_name(),
                last_name=fake.last_name(),
                email=fake.unique.email(),
                hashed_password=user_hash,
                role=UserRole.USER,
                is_active=True,
            )
            db.add(user)
            users.append(user)
        db.flush()

        # 2. Tasks with links, assignees and a few comments
        print(f"Seeding {task_count} Tasks...")
        tasks = []
        for _ in range(task_count):
            task = Task(
                title=fake.sentence(nb_words=4).rstrip("."),
                description=fake.paragraph(),
                status=TaskStatus.UNASSIGNED,
                created_by=admin.id,
            )
            for link_type in rng.sample(list(LinkType), k=rng.randint(0, 2)):
                task.links.append(TaskLink(link_type=link_type, name=fake.word().title(), url=fake.url()))

            assignees = rng.sample(users, k=rng.randint(0, min(3, len(users))))
            for user in assignees:
                task.assignments.append(TaskAssignment(user_id=user.id))
            if assignees:
                task.status = rng.choice(
                    [TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]
                )
                author = rng.choice(assignees)
                task.comments.append(TaskComment(user_id=author.id, content=fake.sentence()))

            db.add(task)
            tasks.append(task)
        db.flush()

        # 3. Documentation
        print("Seeding Documentation...")
        page_count = 0
        for order, (title, slug) in enumerate(DOC_SECTIONS):
            section = DocumentationSection(title=title, slug=slug, order=order)
            for page_order in range(rng.randint(1, 3)):
                section.pages.append(DocumentationPage(
                    title=fake.sentence(nb_words=3).rstrip("."),
                    content="\n\n".join(fake.paragraphs(nb=3)),
                    order=page_order,
                ))
                page_count += 1
            db.add(section)

        db.commit()
        summary = {
            "users": len(users) + 1,
            "tasks": len(tasks),
            "sections": len(DOC_SECTIONS),
            "pages": page_count,
        }
        print(f"✅ Seeded {summary}")
        print(f"  Admin: {ADMIN_EMAIL} / {ADMIN_PASSWORD}")
        return summary

    except Exception:
        db.rollback()
        raise
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    run_seed()
