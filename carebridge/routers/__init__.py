from carebridge.routers.health import health_router
from carebridge.routers.prescreening import prescreening_router
from carebridge.routers.prescription import prescription_router
from carebridge.routers.speech import speech_router
from carebridge.routers.transcript import transcript_router
from carebridge.routers.translation import translation_router
from carebridge.routers.users import users_router

__all__ = [
    "health_router",
    "prescreening_router",
    "prescription_router",
    "speech_router",
    "transcript_router",
    "translation_router",
    "users_router",
]
