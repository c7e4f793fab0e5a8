from src.services import (
    family_access_service,
    invite_code_service,
    recurrence_engine,
)


__all__ = [
    "family_access_service",
    "invite_code_service",
    "recurrence_engine",
]
