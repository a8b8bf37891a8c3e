from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from pt_tracker.api.deps import CurrentUser, get_current_user
from pt_tracker.core.database import get_db
from pt_tracker.schemas import PreferencesRead, PreferencesUpdate, PushTokenRegister, PushTokenUnregister
from pt_tracker.services.preferences import get_preference_row, preferences_dict, save_preferences
from pt_tracker.services.push import PushMessage, get_active_tokens, register_token, send_push_notifications, unregister_token

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.post("/register")
def register_push_token(
    body: PushTokenRegister,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    token = body.expo_push_token.strip()
    if not token:
        raise HTTPException(status_code=400, detail="expo_push_token required")
    register_token(db, user.role, user.client_id, token, body.device_name)
    return {"success": True}


@router.post("/unregister")
def unregister_push_token(
    body: PushTokenUnregister,
    _: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    token = body.expo_push_token.strip()
    if not token:
        raise HTTPException(status_code=400, detail="expo_push_token required")
    unregister_token(db, token)
    return {"success": True}


@router.get("/preferences", response_model=PreferencesRead)
def get_preferences(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return preferences_dict(get_preference_row(db, user.role, user.client_id))


@router.put("/preferences", response_model=PreferencesRead)
def update_preferences(
    body: PreferencesUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return save_preferences(db, user.role, user.client_id, body.model_dump(exclude_none=True))


@router.post("/test")
def send_test_notification(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    tokens = get_active_tokens(db, user.role, user.client_id)
    if not tokens:
        raise HTTPException(status_code=400, detail="No push tokens registered")
    messages = [
        PushMessage(
            to=token,
            title="Test Notification",
            body="This is a test notification from PT Tracker!",
            data={"type": "test"},
        )
        for token in tokens
    ]
    send_push_notifications(db, messages)
    return {"success": True, "sent_to": len(tokens)}
