"""initial schema

Revision ID: 3f9a1c2e7b40
Revises:
Create Date: 2026-10-18 09:12:41.204117
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3f9a1c2e7b40"
down_revision = None
branch_labels = None
depends_on = None


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _uuid_pk():
    return sa.Column("id", sa.String(length=36), primary_key=True, nullable=False)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade():
    # --- profiles ---
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=160), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("role IN ('admin', 'user')", name="ck_profiles_role"),
    )
    with op.batch_alter_table("profiles") as batch_op:
        batch_op.create_index(batch_op.f("ix_profiles_email"), ["email"], unique=False)
        batch_op.create_index(batch_op.f("ix_profiles_role"), ["role"], unique=False)
        batch_op.create_index(batch_op.f("ix_profiles_created_at"), ["created_at"], unique=False)

    # --- site_settings ---
    op.create_table(
        "site_settings",
        _uuid_pk(),
        sa.Column("key", sa.String(length=120), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    with op.batch_alter_table("site_settings") as batch_op:
        batch_op.create_index(batch_op.f("ix_site_settings_key"), ["key"], unique=True)
        batch_op.create_index(batch_op.f("ix_site_settings_is_public"), ["is_public"], unique=False)
        batch_op.create_index(batch_op.f("ix_site_settings_created_at"), ["created_at"], unique=False)

    # --- donations ---
    op.create_table(
        "donations",
        _uuid_pk(),
        sa.Column("donor_name", sa.String(length=160), nullable=False),
        sa.Column("donor_email", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("payment_status", sa.String(length=20), nullable=False),
        sa.Column("stripe_session_id", sa.String(length=255), nullable=True),
        sa.Column("project_id", sa.String(length=36), nullable=True),
        sa.Column("program_category", sa.String(length=80), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_donations_amount_positive"),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'completed', 'failed')",
            name="ck_donations_payment_status",
        ),
    )
    with op.batch_alter_table("donations") as batch_op:
        batch_op.create_index(batch_op.f("ix_donations_donor_email"), ["donor_email"], unique=False)
        batch_op.create_index(batch_op.f("ix_donations_payment_status"), ["payment_status"], unique=False)
        batch_op.create_index(batch_op.f("ix_donations_stripe_session_id"), ["stripe_session_id"], unique=True)
        batch_op.create_index(batch_op.f("ix_donations_project_id"), ["project_id"], unique=False)
        batch_op.create_index(batch_op.f("ix_donations_created_at"), ["created_at"], unique=False)
        batch_op.create_index("ix_donations_status_created", ["payment_status", "created_at"], unique=False)

    # --- events ---
    op.create_table(
        "events",
        _uuid_pk(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("max_attendees", sa.Integer(), nullable=True),
        sa.Column("current_attendees", sa.Integer(), nullable=False),
        sa.Column("registration_fee", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False),
        sa.Column("featured", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("current_attendees >= 0", name="ck_events_attendees_nonneg"),
        sa.CheckConstraint("registration_fee >= 0", name="ck_events_fee_nonneg"),
        sa.CheckConstraint(
            "max_attendees IS NULL OR current_attendees <= max_attendees",
            name="ck_events_capacity",
        ),
    )
    with op.batch_alter_table("events") as batch_op:
        batch_op.create_index(batch_op.f("ix_events_date"), ["date"], unique=False)
        batch_op.create_index(batch_op.f("ix_events_published"), ["published"], unique=False)
        batch_op.create_index(batch_op.f("ix_events_created_at"), ["created_at"], unique=False)

    # --- programs ---
    op.create_table(
        "programs",
        _uuid_pk(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=80), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False),
        sa.Column("featured", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    with op.batch_alter_table("programs") as batch_op:
        batch_op.create_index(batch_op.f("ix_programs_category"), ["category"], unique=False)
        batch_op.create_index(batch_op.f("ix_programs_published"), ["published"], unique=False)
        batch_op.create_index(batch_op.f("ix_programs_created_at"), ["created_at"], unique=False)

    # --- projects ---
    op.create_table(
        "projects",
        _uuid_pk(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("target_amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("raised_amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("image_gallery", sa.JSON(), nullable=False),
        sa.Column("show_gallery", sa.Boolean(), nullable=False),
        sa.Column("beneficiaries", sa.Integer(), nullable=False),
        sa.Column("program_category", sa.String(length=80), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False),
        sa.Column("featured", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("target_amount > 0", name="ck_projects_target_positive"),
        sa.CheckConstraint("raised_amount >= 0", name="ck_projects_raised_nonneg"),
        sa.CheckConstraint("beneficiaries >= 0", name="ck_projects_beneficiaries_nonneg"),
        sa.CheckConstraint("status IN ('active', 'completed', 'upcoming')", name="ck_projects_status"),
    )
    with op.batch_alter_table("projects") as batch_op:
        batch_op.create_index(batch_op.f("ix_projects_status"), ["status"], unique=False)
        batch_op.create_index(batch_op.f("ix_projects_program_category"), ["program_category"], unique=False)
        batch_op.create_index(batch_op.f("ix_projects_published"), ["published"], unique=False)
        batch_op.create_index(batch_op.f("ix_projects_created_at"), ["created_at"], unique=False)
        batch_op.create_index("ix_projects_category_published", ["program_category", "published"], unique=False)

    # --- contact_messages ---
    op.create_table(
        "contact_messages",
        _uuid_pk(),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=120), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("assigned_to", sa.String(length=128), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("status IN ('new', 'in_progress', 'resolved')", name="ck_contact_messages_status"),
    )
    with op.batch_alter_table("contact_messages") as batch_op:
        batch_op.create_index(batch_op.f("ix_contact_messages_email"), ["email"], unique=False)
        batch_op.create_index(batch_op.f("ix_contact_messages_status"), ["status"], unique=False)
        batch_op.create_index(batch_op.f("ix_contact_messages_created_at"), ["created_at"], unique=False)

    # --- newsletter_subscribers ---
    op.create_table(
        "newsletter_subscribers",
        _uuid_pk(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=True),
        sa.Column("user_id", sa.String(length=128), nullable=True),
        sa.Column("subscribed_at", sa.DateTime(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("unsubscribe_token", sa.String(length=64), nullable=False),
        sa.UniqueConstraint("unsubscribe_token"),
    )
    with op.batch_alter_table("newsletter_subscribers") as batch_op:
        batch_op.create_index(batch_op.f("ix_newsletter_subscribers_email"), ["email"], unique=True)
        batch_op.create_index(batch_op.f("ix_newsletter_subscribers_user_id"), ["user_id"], unique=False)
        batch_op.create_index(batch_op.f("ix_newsletter_subscribers_subscribed_at"), ["subscribed_at"], unique=False)
        batch_op.create_index(batch_op.f("ix_newsletter_subscribers_is_active"), ["is_active"], unique=False)

    # --- site_stats ---
    op.create_table(
        "site_stats",
        _uuid_pk(),
        sa.Column("key", sa.String(length=80), nullable=False),
        sa.Column("label", sa.String(length=160), nullable=False),
        sa.Column("value", sa.String(length=80), nullable=False),
        sa.Column("icon", sa.String(length=60), nullable=False),
        sa.Column("page", sa.String(length=40), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    with op.batch_alter_table("site_stats") as batch_op:
        batch_op.create_index(batch_op.f("ix_site_stats_key"), ["key"], unique=False)
        batch_op.create_index(batch_op.f("ix_site_stats_page"), ["page"], unique=False)

    # --- response_times ---
    op.create_table(
        "response_times",
        _uuid_pk(),
        sa.Column("inquiry_type", sa.String(length=120), nullable=False),
        sa.Column("response_time", sa.String(length=80), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )


def downgrade():
    op.drop_table("response_times")

    with op.batch_alter_table("site_stats") as batch_op:
        batch_op.drop_index(batch_op.f("ix_site_stats_page"))
        batch_op.drop_index(batch_op.f("ix_site_stats_key"))
    op.drop_table("site_stats")

    with op.batch_alter_table("newsletter_subscribers") as batch_op:
        batch_op.drop_index(batch_op.f("ix_newsletter_subscribers_is_active"))
        batch_op.drop_index(batch_op.f("ix_newsletter_subscribers_subscribed_at"))
        batch_op.drop_index(batch_op.f("ix_newsletter_subscribers_user_id"))
        batch_op.drop_index(batch_op.f("ix_newsletter_subscribers_email"))
    op.drop_table("newsletter_subscribers")

    with op.batch_alter_table("contact_messages") as batch_op:
        batch_op.drop_index(batch_op.f("ix_contact_messages_created_at"))
        batch_op.drop_index(batch_op.f("ix_contact_messages_status"))
        batch_op.drop_index(batch_op.f("ix_contact_messages_email"))
    op.drop_table("contact_messages")

    with op.batch_alter_table("projects") as batch_op:
        batch_op.drop_index("ix_projects_category_published")
        batch_op.drop_index(batch_op.f("ix_projects_created_at"))
        batch_op.drop_index(batch_op.f("ix_projects_published"))
        batch_op.drop_index(batch_op.f("ix_projects_program_category"))
        batch_op.drop_index(batch_op.f("ix_projects_status"))
    op.drop_table("projects")

    with op.batch_alter_table("programs") as batch_op:
        batch_op.drop_index(batch_op.f("ix_programs_created_at"))
        batch_op.drop_index(batch_op.f("ix_programs_published"))
        batch_op.drop_index(batch_op.f("ix_programs_category"))
    op.drop_table("programs")

    with op.batch_alter_table("events") as batch_op:
        batch_op.drop_index(batch_op.f("ix_events_created_at"))
        batch_op.drop_index(batch_op.f("ix_events_published"))
        batch_op.drop_index(batch_op.f("ix_events_date"))
    op.drop_table("events")

    with op.batch_alter_table("donations") as batch_op:
        batch_op.drop_index("ix_donations_status_created")
        batch_op.drop_index(batch_op.f("ix_donations_created_at"))
        batch_op.drop_index(batch_op.f("ix_donations_project_id"))
        batch_op.drop_index(batch_op.f("ix_donations_stripe_session_id"))
        batch_op.drop_index(batch_op.f("ix_donations_payment_status"))
        batch_op.drop_index(batch_op.f("ix_donations_donor_email"))
    op.drop_table("donations")

    with op.batch_alter_table("site_settings") as batch_op:
        batch_op.drop_index(batch_op.f("ix_site_settings_created_at"))
        batch_op.drop_index(batch_op.f("ix_site_settings_is_public"))
        batch_op.drop_index(batch_op.f("ix_site_settings_key"))
    op.drop_table("site_settings")

    with op.batch_alter_table("profiles") as batch_op:
        batch_op.drop_index(batch_op.f("ix_profiles_created_at"))
        batch_op.drop_index(batch_op.f("ix_profiles_role"))
        batch_op.drop_index(batch_op.f("ix_profiles_email"))
    op.drop_table("profiles")
