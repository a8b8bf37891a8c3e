from .auth import AuthUser, ClientLoginRequest, LoginResponse, TrainerLoginRequest
from .clients import ClientCreate, ClientRead, ClientUpdate
from .exercises import ExerciseRead, ExerciseWrite
from .measurements import MeasurementRead, MeasurementWrite
from .messages import ConversationSummary, MessageCreate, MessageRead
from .notifications import PreferencesRead, PreferencesUpdate, PushTokenRegister, PushTokenUnregister
from .photos import ProgressPhotoRead
from .sessions import SessionCreate, SessionRead, SessionUpdate
from .workouts import (
    TemplateRead,
    TemplateWrite,
    WorkoutLogBatch,
    WorkoutLogCreate,
    WorkoutLogRead,
    WorkoutLogReorder,
    WorkoutLogUpdate,
)

__all__ = [
    "AuthUser",
    "ClientCreate",
    "ClientLoginRequest",
    "ClientRead",
    "ClientUpdate",
    "ConversationSummary",
    "ExerciseRead",
    "ExerciseWrite",
    "LoginResponse",
    "MeasurementRead",
    "MeasurementWrite",
    "MessageCreate",
    "MessageRead",
    "PreferencesRead",
    "PreferencesUpdate",
    "ProgressPhotoRead",
    "PushTokenRegister",
    "PushTokenUnregister",
    "SessionCreate",
    "SessionRead",
    "SessionUpdate",
    "TemplateRead",
    "TemplateWrite",
    "TrainerLoginRequest",
    "WorkoutLogBatch",
    "WorkoutLogCreate",
    "WorkoutLogRead",
    "WorkoutLogReorder",
    "WorkoutLogUpdate",
]
