from alembic import op
import sqlalchemy as sa

revision = "001_initial"
down_revision = None

TASK_STATUS = sa.Enum(
    "unassigned", "pending", "in_progress", "completed", "paused", name="task_status"
)
LINK_TYPE = sa.Enum("plugins", "documentation", "tutorials", name="task_link_type")
REQUEST_STATUS = sa.Enum("pending", "approved", "rejected", name="assignment_request_status")


def upgrade():
    # ── USERS ─────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_first_name", "users", ["first_name"])
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_is_active", "users", ["is_active"])

    # ── TASKS ─────────────────────────────────────────────────────
    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", TASK_STATUS, nullable=False, server_default="unassigned"),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("paused_reason", sa.Text(), nullable=True),
        sa.Column("paused_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("paused_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_tasks_title", "tasks", ["title"])
    op.create_index("ix_tasks_status", "tasks", ["status"])
    op.create_index("ix_tasks_created_by", "tasks", ["created_by"])
    op.create_index("ix_tasks_created_at", "tasks", ["created_at"])

    op.create_table(
        "task_assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("task_id", sa.Integer(), sa.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("task_id", "user_id", name="uq_task_assignments_task_user"),
    )
    op.create_index("ix_task_assignments_task_id", "task_assignments", ["task_id"])
    op.create_index("ix_task_assignments_user_id", "task_assignments", ["user_id"])

    op.create_table(
        "task_links",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("task_id", sa.Integer(), sa.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("link_type", LINK_TYPE, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_task_links_task_id", "task_links", ["task_id"])

    # ── COMMENTS / REQUESTS ───────────────────────────────────────
    op.create_table(
        "task_comments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("task_id", sa.Integer(), sa.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_task_comments_task_id", "task_comments", ["task_id"])
    op.create_index("ix_task_comments_user_id", "task_comments", ["user_id"])

    op.create_table(
        "assignment_requests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("task_id", sa.Integer(), sa.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", REQUEST_STATUS, nullable=False, server_default="pending"),
        sa.Column("admin_comment", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_assignment_requests_task_id", "assignment_requests", ["task_id"])
    op.create_index("ix_assignment_requests_user_id", "assignment_requests", ["user_id"])
    op.create_index("ix_assignment_requests_status", "assignment_requests", ["status"])
    op.create_index("ix_assignment_requests_created_at", "assignment_requests", ["created_at"])

    # PARTIAL unique index: at most one pending request per (task, user)
    op.execute("""
        CREATE UNIQUE INDEX uq_assignment_requests_pending
        ON assignment_requests (task_id, user_id)
        WHERE status = 'pending'
    """)

    # ── NOTIFICATIONS ─────────────────────────────────────────────
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.String(255), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "task_comment_id", sa.Integer(),
            sa.ForeignKey("task_comments.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column(
            "assignment_request_id", sa.Integer(),
            sa.ForeignKey("assignment_requests.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_read", "notifications", ["read"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])

    # Composite for the sidebar badge: unread rows of one user
    op.create_index("ix_notifications_user_read", "notifications", ["user_id", "read"])

    # ── DOCUMENTATION ─────────────────────────────────────────────
    op.create_table(
        "documentation_sections",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_documentation_sections_slug", "documentation_sections", ["slug"], unique=True)

    op.create_table(
        "documentation_pages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "section_id", sa.Integer(),
            sa.ForeignKey("documentation_sections.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_documentation_pages_section_order", "documentation_pages", ["section_id", "order"])

    # ── KEEP ALIVE ────────────────────────────────────────────────
    op.create_table(
        "keep_alive",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("last_ping", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.execute("INSERT INTO keep_alive (id) VALUES (1)")


def downgrade():
    op.drop_table("keep_alive")
    op.drop_index("ix_documentation_pages_section_order", "documentation_pages")
    op.drop_table("documentation_pages")
    op.drop_index("ix_documentation_sections_slug", "documentation_sections")
    op.drop_table("documentation_sections")

    op.drop_index("ix_notifications_user_read", "notifications")
    op.drop_index("ix_notifications_created_at", "notifications")
    op.drop_index("ix_notifications_read", "notifications")
    op.drop_index("ix_notifications_user_id", "notifications")
    op.drop_table("notifications")

    op.execute("DROP INDEX IF EXISTS uq_assignment_requests_pending")
    op.drop_table("assignment_requests")
    op.drop_table("task_comments")
    op.drop_table("task_links")
    op.drop_table("task_assignments")
    op.drop_table("tasks")
    op.drop_table("users")

    REQUEST_STATUS.drop(op.get_bind(), checkfirst=True)
    LINK_TYPE.drop(op.get_bind(), checkfirst=True)
    TASK_STATUS.drop(op.get_bind(), checkfirst=True)
