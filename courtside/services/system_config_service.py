import logging
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.orm import Session

from courtside.core.exceptions import InvalidConfigValueError
from courtside.models import system_config as config_model

logger = logging.getLogger(__name__)

REQUIRE_STAMINA_TO_JOIN = "REQUIRE_STAMINA_TO_JOIN"
REQUIRE_MATCH_VERIFICATION = "REQUIRE_MATCH_VERIFICATION"
LAST_RERANK_AT = "lastRerankAt"

def get_system_config(db: Session, key: str, default: str = "true") -> str:
    """Returns the stored value for ``key``, or ``default`` when the key is unset."""
    config = db.get(config_model.SystemConfig, key)
    return config.value if config else default

def _validate(key: str, value: str) -> None:
    if key in (REQUIRE_STAMINA_TO_JOIN, REQUIRE_MATCH_VERIFICATION) and value not in ("true", "false"):
        raise InvalidConfigValueError(f"{key} must be 'true' or 'false'")
    if key == LAST_RERANK_AT:
        try:
            datetime.fromisoformat(value)
        except ValueError:
            raise InvalidConfigValueError(f"{key} must be an ISO-8601 timestamp") from None

def set_system_config(db: Session, key: str, value: str, commit: bool = True) -> config_model.SystemConfig:
    _validate(key, value)
    config = db.get(config_model.SystemConfig, key)
    if config:
        config.value = value
    else:
        config = config_model.SystemConfig(key=key, value=value)
        db.add(config)
    if commit:
        db.commit()
        db.refresh(config)
    logger.info("System config %s set to %s", key, value)
    return config

def toggle_system_config(db: Session, key: str) -> str:
    current_value = get_system_config(db, key, "true")
    new_value = "false" if current_value == "true" else "true"
    set_system_config(db, key, new_value)
    return new_value

def list_system_config(db: Session) -> Dict[str, str]:
    return {c.key: c.value for c in db.query(config_model.SystemConfig).all()}

def is_stamina_required(db: Session) -> bool:
    return get_system_config(db, REQUIRE_STAMINA_TO_JOIN, "true") == "true"

def is_verification_required(db: Session) -> bool:
    return get_system_config(db, REQUIRE_MATCH_VERIFICATION, "true") == "true"

def get_last_rerank_at(db: Session) -> Optional[datetime]:
    value = get_system_config(db, LAST_RERANK_AT, "")
    if not value:
        return None
    return datetime.fromisoformat(value)
