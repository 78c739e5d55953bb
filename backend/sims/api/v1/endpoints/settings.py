"""
Pricing Settings API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from sims.db.session import get_db
from sims.logging_config import audit_log, get_client_ip
from sims.schemas.settings import SettingsPayload, SettingsResponse
from sims.services import settings_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _no_cache(response: Response) -> None:
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, proxy-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"


@router.get("", response_model=SettingsResponse)
def get_settings(response: Response, db: Session = Depends(get_db)):
    """All settings; numeric ones as numbers"""
    _no_cache(response)
    return settings_service.get_settings_map(db)


@router.put("", response_model=SettingsResponse)
def update_settings(
    payload: SettingsPayload,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Update some or all settings in one transaction.

    Numeric settings accept numbers or numeric strings and must not be
    negative; unknown keys are rejected.
    """
    values = payload.root
    updated = settings_service.update_settings(db, values)

    audit_log(
        "SETTINGS_UPDATED",
        resource_type="settings",
        details={key: updated.get(key) for key in values},
        ip_address=get_client_ip(request),
    )
    _no_cache(response)
    return updated
