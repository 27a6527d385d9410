"""Create users, employees, applications and the work-authorization chain."""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "3f1c2a9d7b10"
down_revision = None
branch_labels = None
depends_on = None


# Shared by several tables; created once in upgrade(), never per table.
gender = postgresql.ENUM("Male", "Female", "Other", name="gender", create_type=False)
citizenship = postgresql.ENUM(
    "GreenCard", "Citizen", "WorkAuthorization", name="citizenship", create_type=False
)
visa_type = postgresql.ENUM(
    "H1-B", "L2", "F1(CPT/OPT)", "H4", "Other", name="visa_type", create_type=False
)
review_status = postgresql.ENUM(
    "NeverSubmitted", "Pending", "Approved", "Rejected", name="review_status", create_type=False
)
user_role = postgresql.ENUM("HR", "Employee", name="user_role", create_type=False)
chain_document_name = postgresql.ENUM(
    "OPTReceipt", "I-983", "I-20", name="chain_document_name", create_type=False
)

NAMED_ENUMS = (gender, citizenship, visa_type, review_status, user_role, chain_document_name)


def _profile_columns() -> list[sa.Column]:
    text_columns = [
        ("first_name", 120),
        ("last_name", 120),
        ("middle_name", 120),
        ("preferred_name", 120),
        ("ssn", 16),
        ("address_building", 120),
        ("address_street", 255),
        ("address_city", 120),
        ("address_state", 64),
        ("address_zip", 16),
        ("cell_phone", 32),
        ("work_phone", 32),
        ("emergency_first_name", 120),
        ("emergency_last_name", 120),
        ("emergency_middle_name", 120),
        ("emergency_phone", 32),
        ("emergency_email", 255),
        ("emergency_relationship", 64),
        ("profile_picture_url", 512),
        ("driver_license_url", 512),
    ]
    columns = [
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", gender, nullable=True),
        sa.Column("citizenship", citizenship, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]
    columns.extend(
        sa.Column(name, sa.String(length=length), nullable=False, server_default="")
        for name, length in text_columns
    )
    return columns


def upgrade() -> None:
    """Create the onboarding schema."""

    bind = op.get_bind()
    # Offline (--sql) runs cannot query for existing types.
    checkfirst = not op.get_context().as_sql
    for enum in NAMED_ENUMS:
        enum.create(bind, checkfirst=checkfirst)

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("employment_visa_type", visa_type, nullable=True),
        sa.Column("employment_visa_title", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("employment_start_date", sa.Date(), nullable=True),
        sa.Column("employment_end_date", sa.Date(), nullable=True),
        *_profile_columns(),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=80), nullable=False, unique=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=True, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=False, unique=True),
        sa.Column("reference_first_name", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("reference_last_name", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("reference_middle_name", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("reference_phone", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("reference_email", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("reference_relationship", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("status", review_status, nullable=False, server_default=sa.text("'NeverSubmitted'")),
        sa.Column("feedback", sa.Text(), nullable=False, server_default=""),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_profile_columns(),
    )
    op.create_index(op.f("ix_applications_status"), "applications", ["status"], unique=False)

    op.create_table(
        "work_authorizations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("application_id", sa.Integer(), sa.ForeignKey("applications.id"), nullable=False, unique=True),
        sa.Column("visa_type", visa_type, nullable=False, server_default=sa.text("'Other'")),
        sa.Column("visa_title", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
    )

    op.create_table(
        "chain_documents",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "work_authorization_id",
            sa.Integer(),
            sa.ForeignKey("work_authorizations.id"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("name", chain_document_name, nullable=False),
        sa.Column("url", sa.String(length=512), nullable=True),
        sa.Column("status", review_status, nullable=False, server_default=sa.text("'NeverSubmitted'")),
        sa.Column("feedback", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        op.f("ix_chain_documents_work_authorization_id"),
        "chain_documents",
        ["work_authorization_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop the onboarding schema."""

    op.drop_index(op.f("ix_chain_documents_work_authorization_id"), table_name="chain_documents")
    op.drop_table("chain_documents")
    op.drop_table("work_authorizations")
    op.drop_index(op.f("ix_applications_status"), table_name="applications")
    op.drop_table("applications")
    op.drop_table("users")
    op.drop_table("employees")
    bind = op.get_bind()
    checkfirst = not op.get_context().as_sql
    for enum in reversed(NAMED_ENUMS):
        enum.drop(bind, checkfirst=checkfirst)
