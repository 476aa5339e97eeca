from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import click
import sqlalchemy as sa
from faker import Faker
from flask import Flask
from flask.cli import AppGroup

from hopefoundation.extensions import db, safe_commit
from hopefoundation.models import (
    Event,
    Profile,
    Program,
    Project,
    ResponseTime,
    SiteStat,
)
from hopefoundation.models.program import DEFAULT_CATEGORIES, category_label

fake = Faker()

hope = AppGroup("hope", help="HopeFoundation maintenance commands.")


@hope.command("init-db")
def init_db():
    """Create all tables (development / SQLite only; use migrations elsewhere)."""
    db.create_all()
    click.secho("✅ Tables created", fg="bright_green", bold=True)


@hope.command("seed-demo")
@click.option("--projects", default=3, show_default=True, help="Projects per program")
@click.option("--events", default=6, show_default=True)
@click.option("--clear", is_flag=True)
def seed_demo(projects, events, clear):
    """Seed demo programs, projects, events and stats."""
    if clear:
        _clear_data()
    _seed_programs_and_projects(projects)
    _seed_events(events)
    _seed_stats()
    if not safe_commit():
        raise click.ClickException("Seeding failed; see log for details")
    click.secho("✅ Demo data seeded!", fg="bright_green", bold=True)


@hope.command("promote")
@click.argument("email")
def promote(email):
    """Give the profile with EMAIL the admin role."""
    profile = db.session.scalar(sa.select(Profile).where(Profile.email == email))
    if profile is None:
        raise click.ClickException(f"No profile with email {email}; sign in once first")
    profile.role = "admin"
    if not safe_commit():
        raise click.ClickException("Could not update profile")
    click.secho(f"✅ {email} is now an admin", fg="bright_green", bold=True)


# ---------- Helpers ----------
def _clear_data():
    click.secho("🧹 Clearing demo data…", fg="yellow")
    for model in (Project, Program, Event, SiteStat, ResponseTime):
        deleted = db.session.execute(sa.delete(model)).rowcount
        click.secho(f"  ↳ {deleted} {model.__name__} removed", fg="yellow")
    db.session.commit()


def _seed_programs_and_projects(per_program):
    today = datetime.utcnow().date()
    for category in DEFAULT_CATEGORIES:
        db.session.add(
            Program(
                title=category_label(category),
                description=fake.paragraph(nb_sentences=3),
                category=category,
                image_url=fake.image_url(),
                published=True,
                featured=fake.boolean(40),
            )
        )
        for _ in range(per_program):
            target = Decimal(fake.random_int(min=5, max=100) * 1000)
            start = today - timedelta(days=fake.random_int(0, 180))
            db.session.add(
                Project(
                    title=fake.catch_phrase(),
                    description=fake.paragraph(nb_sentences=4),
                    location=f"{fake.city()}, {fake.country()}",
                    target_amount=target,
                    raised_amount=(target * Decimal(fake.random_int(0, 100)) / 100).quantize(Decimal("0.01")),
                    start_date=start,
                    end_date=start + timedelta(days=fake.random_int(90, 720)),
                    status=fake.random_element(("active", "completed", "upcoming")),
                    image_gallery=[fake.image_url() for _ in range(3)],
                    show_gallery=fake.boolean(50),
                    beneficiaries=fake.random_int(50, 20000),
                    program_category=category,
                    published=True,
                    featured=fake.boolean(30),
                )
            )


def _seed_events(count):
    now = datetime.utcnow()
    for _ in range(count):
        capacity = fake.random_element((None, 50, 100, 250))
        db.session.add(
            Event(
                title=f"{fake.word().capitalize()} {fake.random_element(('Gala', 'Walk', 'Workshop', 'Drive'))}",
                description=fake.paragraph(nb_sentences=2),
                date=now + timedelta(days=fake.random_int(-60, 120)),
                location=fake.address().replace("\n", ", "),
                max_attendees=capacity,
                current_attendees=fake.random_int(0, capacity) if capacity else fake.random_int(0, 40),
                registration_fee=Decimal(fake.random_element((0, 0, 15, 25, 50))),
                published=True,
                featured=fake.boolean(30),
            )
        )


def _seed_stats():
    stats = [
        ("lives_impacted", "Lives Impacted", "50,000+", "Users"),
        ("countries", "Countries", "25", "Globe"),
        ("projects_completed", "Projects Completed", "150+", "Award"),
        ("volunteers", "Volunteers", "1,200+", "Heart"),
    ]
    for order, (key, label, value, icon) in enumerate(stats):
        db.session.add(SiteStat(key=key, label=label, value=value, icon=icon, page="home", display_order=order))
    for order, (kind, eta) in enumerate(
        [("General Inquiries", "24 hours"), ("Partnership", "2-3 business days"), ("Media", "Same day")]
    ):
        db.session.add(ResponseTime(inquiry_type=kind, response_time=eta, display_order=order))


def register_cli(app: Flask) -> None:
    app.cli.add_command(hope)
