from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE = sa.text("status IN ('pending', 'approved')")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False, unique=True),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False),
    )

    op.create_table(
        "faculty_mentors",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("department", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("office", sa.String(), nullable=False),
        sa.Column("specialization", sa.String(), nullable=False),
        sa.Column("availability", sa.JSON(), nullable=False),
        sa.Column("avatar", sa.String(), nullable=True),
    )
    op.create_index("ix_faculty_mentors_email", "faculty_mentors", ["email"], unique=False)

    op.create_table(
        "mentor_bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("mentor_id", sa.Integer(), sa.ForeignKey("faculty_mentors.id"), nullable=False),
        sa.Column("date", sa.String(), nullable=False),
        sa.Column("time", sa.String(), nullable=False),
        sa.Column("purpose", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_mentor_bookings_user_id", "mentor_bookings", ["user_id"], unique=False)
    op.create_index("ix_mentor_bookings_mentor_id", "mentor_bookings", ["mentor_id"], unique=False)
    op.create_index("ix_mentor_bookings_status", "mentor_bookings", ["status"], unique=False)
    op.create_index(
        "uq_mentor_bookings_active_slot",
        "mentor_bookings",
        ["mentor_id", "date", "time"],
        unique=True,
        postgresql_where=ACTIVE,
        sqlite_where=ACTIVE,
    )

    op.create_table(
        "classroom_bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("classroom", sa.String(), nullable=False),
        sa.Column("date", sa.String(), nullable=False),
        sa.Column("time_slot", sa.String(), nullable=False),
        sa.Column("purpose", sa.String(), nullable=False),
        sa.Column("alternative_name", sa.String(), nullable=True),
        sa.Column("alternative_id", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_classroom_bookings_user_id", "classroom_bookings", ["user_id"], unique=False)
    op.create_index("ix_classroom_bookings_status", "classroom_bookings", ["status"], unique=False)
    op.create_index(
        "uq_classroom_bookings_active_slot",
        "classroom_bookings",
        ["classroom", "date", "time_slot"],
        unique=True,
        postgresql_where=ACTIVE,
        sqlite_where=ACTIVE,
    )


def downgrade():
    op.drop_index("uq_classroom_bookings_active_slot", table_name="classroom_bookings")
    op.drop_index("ix_classroom_bookings_status", table_name="classroom_bookings")
    op.drop_index("ix_classroom_bookings_user_id", table_name="classroom_bookings")
    op.drop_table("classroom_bookings")

    op.drop_index("uq_mentor_bookings_active_slot", table_name="mentor_bookings")
    op.drop_index("ix_mentor_bookings_status", table_name="mentor_bookings")
    op.drop_index("ix_mentor_bookings_mentor_id", table_name="mentor_bookings")
    op.drop_index("ix_mentor_bookings_user_id", table_name="mentor_bookings")
    op.drop_table("mentor_bookings")

    op.drop_index("ix_faculty_mentors_email", table_name="faculty_mentors")
    op.drop_table("faculty_mentors")

    op.drop_table("users")
