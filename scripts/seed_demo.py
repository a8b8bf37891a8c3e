#!/usr/bin/env python3
"""Wipes the database and loads demo data: clients, three weeks of sessions,
templates, workout logs, measurements and an exercise library.
   Usage: python3 scripts/seed_demo.py
   Uses DATABASE_URL from the environment or .env. Access codes are fixed (SAR101, MAR102, ...)."""
import sys
from datetime import datetime, timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv  # noqa: E402
from sqlalchemy import delete  # noqa: E402
from sqlmodel import Session, select  # noqa: E402

from pt_tracker.models import (  # noqa: E402
    Client,
    Exercise,
    Measurement,
    Message,
    NotificationPreference,
    ProgressPhoto,
    PushToken,
    TrainingSession,
    WorkoutLog,
    WorkoutTemplate,
)

CLIENTS = [
    ("Sarah", "Johnson", "sarah.j@email.com", "555-0101", "Lose 15 lbs, improve cardio endurance", "Prefers morning sessions", "SAR101", 45),
    ("Marcus", "Chen", "marcus.c@email.com", "555-0102", "Build muscle mass, increase bench press", "Former college athlete", "MAR102", 30),
    ("Emily", "Rodriguez", "emily.r@email.com", "555-0103", "Postpartum fitness, core strength", "Cleared by doctor for all exercises", "EMI103", 25),
    ("James", "Okafor", "james.o@email.com", "555-0104", "Marathon prep, injury prevention", "Has old knee injury - avoid high impact", "JAM104", 20),
    ("Ava", "Patel", "ava.p@email.com", "555-0105", "General fitness, stress relief", "Yoga background, new to weight training", "AVA105", 14),
    ("Tom", "Baker", "tom.b@email.com", "555-0106", "Rehab after shoulder surgery", None, "TOM106", 7),
    ("Lisa", "Nguyen", None, "555-0107", "Weight loss and toning", "Vegetarian - adjust nutrition tips", "LIS107", 3),
    ("Derek", "Miller", "derek.m@email.com", None, None, "Trial session only", "DER108", 2),
]
INACTIVE_CODES = {"DER108"}

# (client index, day offset from this week's Monday, hour, duration, status, notes)
WEEK_SESSIONS = [
    (0, -14, 8, 60, "completed", "Great energy, hit all targets"),
    (1, -14, 10, 60, "completed", "Bench PR: 185 lbs"),
    (2, -13, 9, 45, "completed", "Focused on pelvic floor exercises"),
    (3, -13, 16, 60, "completed", "Easy 5K pace run + stretching"),
    (0, -12, 8, 60, "completed", None),
    (4, -12, 11, 45, "completed", "Intro to free weights"),
    (1, -11, 10, 60, "no_show", None),
    (5, -10, 14, 45, "completed", "Assessment session"),
    (0, -7, 8, 60, "completed", "Cardio intervals + upper body"),
    (1, -7, 10, 60, "completed", "Back & biceps day"),
    (2, -6, 9, 45, "completed", "Core circuit went well"),
    (3, -6, 16, 60, "cancelled", "Client sick"),
    (4, -5, 11, 45, "completed", "Squats and deadlifts intro"),
    (0, -5, 8, 60, "completed", None),
    (5, -4, 14, 45, "completed", "Shoulder rehab band work"),
    (1, -4, 10, 60, "completed", "Chest & triceps"),
    (6, -3, 17, 60, "completed", "Initial assessment"),
    (0, 0, 8, 60, "completed", "HIIT + core"),
    (1, 0, 10, 60, "completed", "Leg day - squats, lunges, leg press"),
    (2, 1, 9, 45, "completed", "Resistance bands full body"),
    (4, 1, 11, 45, "completed", "Progressed to 15lb dumbbells"),
    (3, 2, 16, 60, "completed", "Tempo run 8K"),
    (5, 2, 14, 45, "completed", "Good ROM improvement"),
]
# (client index, day offset from today, hour, duration, status, notes)
UPCOMING_SESSIONS = [
    (0, 0, 8, 60, "completed", "Morning cardio blast"),
    (6, 0, 10, 60, "scheduled", None),
    (1, 0, 13, 60, "scheduled", None),
    (4, 0, 15, 45, "scheduled", None),
    (3, 0, 17, 60, "scheduled", None),
    (2, 1, 9, 45, "scheduled", None),
    (5, 1, 14, 45, "scheduled", None),
    (0, 2, 8, 60, "scheduled", None),
    (1, 2, 10, 60, "scheduled", None),
]

TEMPLATES = {
    "Upper Body Strength": [
        {"exercise_name": "Bench Press", "sets": 4, "reps": 8, "weight": 135},
        {"exercise_name": "Overhead Press", "sets": 3, "reps": 10, "weight": 65},
        {"exercise_name": "Barbell Row", "sets": 4, "reps": 8, "weight": 115},
        {"exercise_name": "Dumbbell Curl", "sets": 3, "reps": 12, "weight": 25},
        {"exercise_name": "Tricep Dips", "sets": 3, "reps": 12},
    ],
    "Lower Body Power": [
        {"exercise_name": "Back Squat", "sets": 4, "reps": 6, "weight": 185},
        {"exercise_name": "Romanian Deadlift", "sets": 3, "reps": 10, "weight": 135},
        {"exercise_name": "Walking Lunges", "sets": 3, "reps": 12},
        {"exercise_name": "Leg Press", "sets": 3, "reps": 12, "weight": 270},
        {"exercise_name": "Calf Raises", "sets": 4, "reps": 15, "weight": 90},
    ],
    "Full Body HIIT": [
        {"exercise_name": "Burpees", "sets": 4, "reps": 10},
        {"exercise_name": "Kettlebell Swings", "sets": 4, "reps": 15, "weight": 35},
        {"exercise_name": "Box Jumps", "sets": 3, "reps": 12},
        {"exercise_name": "Battle Ropes", "sets": 3, "reps": 30},
        {"exercise_name": "Mountain Climbers", "sets": 3, "reps": 20},
    ],
    "Core & Mobility": [
        {"exercise_name": "Plank Hold", "sets": 3, "reps": 60},
        {"exercise_name": "Dead Bug", "sets": 3, "reps": 12},
        {"exercise_name": "Bird Dog", "sets": 3, "reps": 10},
        {"exercise_name": "Hip Flexor Stretch", "sets": 2, "reps": 30},
        {"exercise_name": "Foam Rolling", "sets": 1, "reps": 300},
    ],
}

# Logged against the three most recent completed sessions, newest first
WORKOUT_LOGS = [
    [("Treadmill Intervals", 5, 3, None), ("Plank Hold", 3, 60, None), ("Jump Rope", 4, 100, None)],
    [("Back Squat", 4, 6, 185), ("Romanian Deadlift", 3, 10, 135), ("Leg Press", 3, 12, 270), ("Calf Raises", 4, 15, 90)],
    [("Bench Press", 4, 8, 175), ("Overhead Press", 3, 10, 65), ("Barbell Row", 4, 8, 125), ("Dumbbell Curl", 3, 12, 30)],
]

# (client index, day offset from today, hour, weight, body fat, chest, waist, hips, arm, thigh)
MEASUREMENTS = [
    (0, -42, 9, 158, 28, 36, 30, 38, 12, 22),
    (0, -28, 9, 155, 27, 35.5, 29.5, 37.5, 11.8, 21.5),
    (0, -14, 9, 152, 25.5, 35, 29, 37, 11.5, 21),
    (0, -1, 9, 149, 24, 34.5, 28.5, 37, 11.2, 20.5),
    (1, -28, 10, 195, 18, 42, 34, 38, 15, 24),
    (1, -14, 10, 198, 17, 42.5, 33.5, 38, 15.5, 24.5),
    (1, -1, 10, 200, 16.5, 43, 33, 38, 16, 25),
    (2, -21, 9, 145, 30, 34, 32, 39, 11, 22),
    (2, -7, 9, 143, 28.5, 33.5, 31, 38.5, 10.8, 21.5),
    (4, -10, 11, 130, 25, 33, 27, 36, 10, 20),
]

EXERCISES = [
    ("Bench Press", "Lie on a flat bench, grip the barbell slightly wider than shoulder-width, lower to chest and press up.", "https://www.youtube.com/watch?v=rT7DgCr-3pg"),
    ("Back Squat", "Bar on upper traps, feet shoulder-width apart, squat until thighs are parallel to the floor.", "https://www.youtube.com/watch?v=ultWZbUMPL8"),
    ("Deadlift", "Hinge at the hips, grip the bar just outside your knees, drive through your heels to stand.", "https://www.youtube.com/watch?v=op9kVnSso6Q"),
    ("Overhead Press", "Press the barbell from shoulder height to full lockout overhead. Keep core tight.", "https://www.youtube.com/watch?v=2yjwXTZQDDI"),
    ("Barbell Row", "Hinge forward 45 degrees, pull the barbell to your lower chest. Squeeze shoulder blades.", None),
    ("Pull-Up", "Hang from a bar with overhand grip, pull yourself up until chin clears the bar.", "https://www.youtube.com/watch?v=eGo4IYlbE5g"),
    ("Romanian Deadlift", "Hold barbell at hip height, hinge forward keeping legs slightly bent, feel the hamstring stretch.", None),
    ("Dumbbell Curl", "Stand with dumbbells at sides, curl up rotating palms to face shoulders at the top.", None),
    ("Plank Hold", "Hold a push-up position on forearms, keep body in a straight line from head to heels.", "https://www.youtube.com/watch?v=ASdvN_XEl_c"),
    ("Kettlebell Swings", "Hinge at hips, swing kettlebell between legs then thrust hips forward to swing to chest height.", "https://www.youtube.com/watch?v=YSxHifyI6s8"),
    ("Box Jumps", "Stand facing a box, swing arms and jump onto the box landing softly with both feet.", None),
    ("Mountain Climbers", "In push-up position, alternate driving knees toward chest at a fast pace.", "https://www.youtube.com/watch?v=nmwgirgXLYM"),
]

# Children before parents
CLEAR_ORDER = [
    Message,
    ProgressPhoto,
    NotificationPreference,
    PushToken,
    WorkoutLog,
    Measurement,
    TrainingSession,
    WorkoutTemplate,
    Exercise,
    Client,
]


def seed(db: Session, now: datetime) -> dict:
    """Replace every domain row with demo data relative to `now` (naive UTC). Returns row counts."""
    for model in CLEAR_ORDER:
        db.exec(delete(model))
    db.commit()

    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    monday = today - timedelta(days=today.weekday())

    clients = []
    for first, last, email, phone, goals, notes, code, age_days in CLIENTS:
        clients.append(
            Client(
                first_name=first,
                last_name=last,
                email=email,
                phone=phone,
                goals=goals,
                notes=notes,
                access_code=code,
                is_active=code not in INACTIVE_CODES,
                created_at=now - timedelta(days=age_days),
                updated_at=now - timedelta(days=age_days),
            )
        )
    db.add_all(clients)
    db.commit()
    ids = [c.id for c in clients]

    rows = [(idx, monday + timedelta(days=d, hours=h), dur, st, n) for idx, d, h, dur, st, n in WEEK_SESSIONS]
    rows += [(idx, today + timedelta(days=d, hours=h), dur, st, n) for idx, d, h, dur, st, n in UPCOMING_SESSIONS]
    sessions = [
        TrainingSession(
            client_id=ids[idx],
            scheduled_at=at,
            duration_min=duration,
            status=status,
            notes=notes,
            # Past slots would otherwise be picked up by the reminder scheduler
            reminder_sent=at <= now,
            created_at=at - timedelta(days=1),
            updated_at=at,
        )
        for idx, at, duration, status, notes in rows
    ]
    db.add_all(sessions)

    db.add_all(WorkoutTemplate(name=name, exercises=exercises) for name, exercises in TEMPLATES.items())
    db.commit()

    recent = db.exec(
        select(TrainingSession.id)
        .where(TrainingSession.status == "completed")
        .order_by(TrainingSession.scheduled_at.desc())
        .limit(len(WORKOUT_LOGS))
    ).all()
    logs = [
        WorkoutLog(session_id=session_id, exercise_name=name, sets=sets, reps=reps, weight=weight, sort_order=order)
        for session_id, entries in zip(recent, WORKOUT_LOGS)
        for order, (name, sets, reps, weight) in enumerate(entries)
    ]
    db.add_all(logs)

    measurements = []
    for idx, d, h, weight, fat, chest, waist, hips, arm, thigh in MEASUREMENTS:
        at = today + timedelta(days=d, hours=h)
        measurements.append(
            Measurement(
                client_id=ids[idx],
                recorded_at=at,
                weight_lbs=weight,
                body_fat_pct=fat,
                chest_in=chest,
                waist_in=waist,
                hips_in=hips,
                arm_in=arm,
                thigh_in=thigh,
                created_at=at,
            )
        )
    db.add_all(measurements)

    db.add_all(Exercise(exercise_name=name, description=desc, video_url=url) for name, desc, url in EXERCISES)
    db.commit()

    return {
        "clients": len(clients),
        "sessions": len(sessions),
        "templates": len(TEMPLATES),
        "workout_logs": len(logs),
        "measurements": len(measurements),
        "exercises": len(EXERCISES),
    }


def main() -> None:
    load_dotenv(ROOT / ".env")
    from pt_tracker.core.database import engine, init_db

    init_db()
    with Session(engine) as db:
        counts = seed(db, datetime.utcnow())
    for name, count in counts.items():
        print(f"  {count} {name.replace('_', ' ')}")
    print("Seed complete")


if __name__ == "__main__":
    main()
