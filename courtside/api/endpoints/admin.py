import logging
from typing import Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from courtside.core.config import INITIAL_STAMINA
from courtside.services import auth_service, stamina_service, completion_service, system_config_service
from courtside.models import user as user_model
from courtside.schemas import config_schemas, stamina_schemas
from courtside.api.dependencies import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/reset-stamina", response_model=stamina_schemas.StaminaResetResult)
async def reset_stamina_endpoint(
    db: Session = Depends(get_db),
    admin: user_model.User = Depends(auth_service.require_admin),
):
    count = stamina_service.reset_all_stamina(
        db,
        target=INITIAL_STAMINA,
        reason=f"Admin Reset - All stamina reset to {INITIAL_STAMINA} by {admin.name}",
    )
    return {"message": "All users stamina reset successfully", "count": count}

@router.post("/rerank", response_model=config_schemas.RerankResult)
async def rerank_endpoint(
    db: Session = Depends(get_db),
    admin: user_model.User = Depends(auth_service.require_admin),
):
    logger.info("Admin %s triggered rerank", admin.id)
    last_rerank_at = completion_service.rerank_system(db)
    return {"success": True, "last_rerank_at": last_rerank_at}

@router.post("/backfill", response_model=config_schemas.BackfillResult)
async def backfill_endpoint(
    db: Session = Depends(get_db),
    admin: user_model.User = Depends(auth_service.require_admin),
):
    logger.info("Admin %s triggered points backfill", admin.id)
    count = completion_service.backfill_tournament_points(db)
    return {"success": True, "count": count}

@router.get("/config", response_model=config_schemas.SystemFlags)
async def read_flags_endpoint(
    db: Session = Depends(get_db),
    admin: user_model.User = Depends(auth_service.require_admin),
):
    return config_schemas.SystemFlags(
        require_stamina_to_join=system_config_service.is_stamina_required(db),
        require_match_verification=system_config_service.is_verification_required(db),
        last_rerank_at=system_config_service.get_last_rerank_at(db),
    )

@router.put("/config/{key}", response_model=config_schemas.SystemConfigRead)
async def set_config_endpoint(
    key: str,
    config_in: config_schemas.SystemConfigUpdate,
    db: Session = Depends(get_db),
    admin: user_model.User = Depends(auth_service.require_admin),
):
    return system_config_service.set_system_config(db, key, config_in.value)

@router.post("/config/{key}/toggle", response_model=Dict[str, str])
async def toggle_config_endpoint(
    key: str,
    db: Session = Depends(get_db),
    admin: user_model.User = Depends(auth_service.require_admin),
):
    return {"key": key, "value": system_config_service.toggle_system_config(db, key)}
