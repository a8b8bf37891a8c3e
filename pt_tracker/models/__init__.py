from .client import Client
from .exercise import Exercise
from .logs import ErrorLog, SecurityLog
from .measurement import Measurement
from .message import Message
from .notification import NotificationPreference, PushToken
from .progress_photo import PHOTO_CATEGORIES, ProgressPhoto
from .training_session import SESSION_STATUSES, TrainingSession
from .workout import WorkoutLog, WorkoutTemplate

__all__ = [
    "Client",
    "ErrorLog",
    "Exercise",
    "Measurement",
    "Message",
    "NotificationPreference",
    "PHOTO_CATEGORIES",
    "ProgressPhoto",
    "PushToken",
    "SESSION_STATUSES",
    "SecurityLog",
    "TrainingSession",
    "WorkoutLog",
    "WorkoutTemplate",
]
