#!/usr/bin/env python3
"""Prints a bcrypt hash for TRAINER_PASSWORD_HASH.
   Usage: python3 scripts/hash_trainer_password.py
   Put the output in .env as TRAINER_PASSWORD_HASH=... and drop TRAINER_PASSWORD."""
import sys
from getpass import getpass
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pt_tracker.core.security import hash_password  # noqa: E402

password = getpass("Trainer password: ")
if len(password) < 8:
    print("Password must be at least 8 characters")
    raise SystemExit(1)
if getpass("Repeat: ") != password:
    print("Passwords do not match")
    raise SystemExit(1)
print(hash_password(password))
