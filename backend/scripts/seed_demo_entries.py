from datetime import date, timedelta
import random

from pushrun.core.security import hash_password
from pushrun.core.time_utils import ymd_to_timestamp
from pushrun.db import Base, SessionLocal, engine
from pushrun.models.entry import Entry
from pushrun.models.goal_settings import GoalSettings
from pushrun.models.user import User

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo-password"


def get_or_create_demo_user(db) -> User:
    user = db.query(User).filter(User.email == DEMO_EMAIL).first()
    if user:
        return user
    user = User(email=DEMO_EMAIL, password_hash=hash_password(DEMO_PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    db.add(GoalSettings(user_id=user.id, pushups_goal=150, run_km_goal=30))
    db.commit()
    return user


def clear_recent_entries(db, user_id: str, days: int = 120) -> None:
    """Delete entries in the last N days so we can reseed cleanly."""
    cutoff = ymd_to_timestamp((date.today() - timedelta(days=days)).isoformat())
    db.query(Entry).filter(Entry.user_id == user_id).filter(Entry.date >= cutoff).delete()
    db.commit()


def seed_demo_entries(db, user_id: str, weeks: int = 8) -> int:
    """Insert daily entries for the last `weeks` weeks, skipping some rest days."""
    today = date.today()
    start_day = today - timedelta(days=today.weekday()) - timedelta(weeks=weeks - 1)

    added = 0
    d = start_day
    while d <= today:
        # Sunday is a rest day, and roughly one other day a week gets skipped
        if d.weekday() != 6 and random.random() > 0.15:
            run_km = round(random.uniform(3.0, 12.0), 1) if d.weekday() in (1, 3, 5) else 0.0
            db.add(
                Entry(
                    user_id=user_id,
                    ymd=d.isoformat(),
                    date=ymd_to_timestamp(d.isoformat()),
                    pushups=random.choice([10, 20, 25, 30, 40]),
                    run_km=run_km,
                )
            )
            added += 1
        d += timedelta(days=1)

    db.commit()
    return added


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user = get_or_create_demo_user(db)
        clear_recent_entries(db, user.id)
        n = seed_demo_entries(db, user.id)
        print(f"Seeded {n} entries for {DEMO_EMAIL} (password: {DEMO_PASSWORD})")
    finally:
        db.close()
