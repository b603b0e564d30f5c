"""Idempotent demo data for local development databases."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from videotube.models import Subscription, User, Video, WatchHistoryEntry

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

PLACEHOLDER_MEDIA = "https://placehold.co"

USER_FIXTURES: list[dict[str, str]] = [
    {
        "username": "ana",
        "email": "ana@example.com",
        "full_name": "Ana Ruiz",
        "password": "s3cret-ana",
    },
    {
        "username": "bob",
        "email": "bob@example.com",
        "full_name": "Bob Stone",
        "password": "s3cret-bob",
    },
    {
        "username": "carla",
        "email": "carla@example.com",
        "full_name": "Carla Mendes",
        "password": "s3cret-carla",
    },
    {
        "username": "dev",
        "email": "dev@example.com",
        "full_name": "Dev Channel",
        "password": "s3cret-dev",
    },
]

VIDEO_FIXTURES: list[dict[str, Any]] = [
    {
        "owner": "bob",
        "title": "Sourdough in 10 minutes",
        "description": "Quick starter maintenance routine.",
        "duration": 612.0,
        "views": 1520,
    },
    {
        "owner": "bob",
        "title": "Cast iron care",
        "description": "Seasoning and cleaning without soap myths.",
        "duration": 488.5,
        "views": 740,
    },
    {
        "owner": "carla",
        "title": "Trail running basics",
        "description": "Shoes, pacing and hills.",
        "duration": 903.0,
        "views": 310,
    },
    {
        "owner": "dev",
        "title": "Flask app factories",
        "description": "Structuring a Flask project for tests.",
        "duration": 1260.0,
        "views": 4210,
    },
]

# (subscriber, channel)
SUBSCRIPTION_FIXTURES: list[tuple[str, str]] = [
    ("ana", "bob"),
    ("ana", "dev"),
    ("carla", "bob"),
    ("dev", "carla"),
    ("bob", "dev"),
]

# username -> video titles in watch order
HISTORY_FIXTURES: dict[str, list[str]] = {
    "ana": ["Flask app factories", "Sourdough in 10 minutes", "Cast iron care"],
    "carla": ["Sourdough in 10 minutes"],
}


def _session(database: SQLAlchemy) -> Session:
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    return instance, True


def _placeholder(label: str, size: str) -> str:
    return f"{PLACEHOLDER_MEDIA}/{size}?text={label.replace(' ', '+')}"


def _users_by_name(session: Session) -> dict[str, User]:
    names = [f["username"] for f in USER_FIXTURES]
    rows = session.execute(select(User).where(User.username.in_(names))).scalars()
    return {u.username: u for u in rows}


def seed_users(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create demo accounts; existing ones keep their password."""
    if verbose:
        LOGGER.info("Seeding users...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        for fixture in USER_FIXTURES:
            user = session.execute(
                select(User).filter_by(username=fixture["username"])
            ).scalar_one_or_none()
            created = user is None
            if user is None:
                user = User(
                    username=fixture["username"],
                    email=fixture["email"],
                    full_name=fixture["full_name"],
                    avatar=_placeholder(fixture["username"], "128x128"),
                    cover_image=_placeholder(fixture["full_name"], "1280x320"),
                )
                user.password = fixture["password"]
                session.add(user)
            else:
                user.full_name = fixture["full_name"]
            session.flush()
            _touch(summary, "users", created)

    return summary


def seed_videos(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create demo videos keyed by ``(owner, title)``."""
    if verbose:
        LOGGER.info("Seeding videos...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        users = _users_by_name(session)
        for fixture in VIDEO_FIXTURES:
            owner = users.get(fixture["owner"])
            if owner is None:
                raise RuntimeError(f"User {fixture['owner']} missing while creating videos")
            slug = fixture["title"].lower().replace(" ", "-")
            _, created = _get_or_create(
                session,
                Video,
                owner_id=owner.id,
                title=fixture["title"],
                defaults={
                    "description": fixture["description"],
                    "duration": fixture["duration"],
                    "views": fixture["views"],
                    "video_file": f"{PLACEHOLDER_MEDIA}/videos/{slug}.mp4",
                    "thumbnail": _placeholder(fixture["title"], "640x360"),
                },
            )
            session.flush()
            _touch(summary, "videos", created)

    return summary


def seed_subscriptions(
    database: SQLAlchemy, *, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Create the subscription edges between demo users."""
    if verbose:
        LOGGER.info("Seeding subscriptions...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        users = _users_by_name(session)
        for subscriber_name, channel_name in SUBSCRIPTION_FIXTURES:
            subscriber = users[subscriber_name]
            channel = users[channel_name]
            _, created = _get_or_create(
                session,
                Subscription,
                subscriber_id=subscriber.id,
                channel_id=channel.id,
            )
            session.flush()
            _touch(summary, "subscriptions", created)

    return summary


def seed_watch_history(
    database: SQLAlchemy, *, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Append demo history entries; users that already have history are skipped."""
    if verbose:
        LOGGER.info("Seeding watch history...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        users = _users_by_name(session)
        for username, titles in HISTORY_FIXTURES.items():
            user = users[username]
            existing = session.execute(
                select(func.count()).select_from(WatchHistoryEntry).filter_by(user_id=user.id)
            ).scalar_one()
            if existing:
                for _ in range(existing):
                    _touch(summary, "watch_history", False)
                continue
            for position, title in enumerate(titles):
                video = session.execute(select(Video).filter_by(title=title)).scalars().first()
                if video is None:
                    raise RuntimeError(f"Video {title!r} missing while creating history")
                session.add(
                    WatchHistoryEntry(user_id=user.id, video_id=video.id, position=position)
                )
                _touch(summary, "watch_history", True)
            session.flush()

    return summary


SEEDERS: dict[str, Callable[..., dict[str, dict[str, int]]]] = {
    "users": seed_users,
    "videos": seed_videos,
    "subscriptions": seed_subscriptions,
    "watch_history": seed_watch_history,
}

# Tables a seeder reads rows from
REQUIRES: dict[str, tuple[str, ...]] = {
    "users": (),
    "videos": ("users",),
    "subscriptions": ("users",),
    "watch_history": ("users", "videos"),
}


def resolve_tables(only: Iterable[str] | None = None) -> list[str]:
    """Expand a table selection with its prerequisites, in foreign-key order.

    :raises ValueError: On an unknown table name.
    """
    if not only:
        return list(SEEDERS)
    wanted: set[str] = set()
    pending = list(only)
    while pending:
        name = pending.pop()
        if name not in SEEDERS:
            raise ValueError(f"Unknown seed table: {name}")
        if name not in wanted:
            wanted.add(name)
            pending.extend(REQUIRES[name])
    return [name for name in SEEDERS if name in wanted]


def run_all(
    database: SQLAlchemy,
    *,
    verbose: bool = False,
    only: Iterable[str] | None = None,
) -> dict[str, dict[str, int]]:
    """Run the selected seeders (all by default) in foreign-key order."""
    tables = resolve_tables(only)
    if verbose:
        LOGGER.info("Running seed pipeline for %s...", ", ".join(tables))
    combined: dict[str, dict[str, int]] = {}
    for table in tables:
        result = SEEDERS[table](database, verbose=verbose)
        for name, counters in result.items():
            entry = combined.setdefault(name, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    return combined


def demo_usernames(database: SQLAlchemy) -> set[str]:
    """Usernames from ``USER_FIXTURES`` already present in the database."""
    return set(_users_by_name(_session(database)))


def table_counts(database: SQLAlchemy) -> dict[str, int]:
    """Row count of every seeded table."""
    session = _session(database)
    models = {
        "users": User,
        "videos": Video,
        "subscriptions": Subscription,
        "watch_history": WatchHistoryEntry,
    }
    return {
        name: session.execute(select(func.count()).select_from(model)).scalar_one()
        for name, model in models.items()
    }


__all__ = [
    "SEEDERS",
    "demo_usernames",
    "resolve_tables",
    "run_all",
    "seed_subscriptions",
    "seed_users",
    "seed_videos",
    "seed_watch_history",
    "table_counts",
]
