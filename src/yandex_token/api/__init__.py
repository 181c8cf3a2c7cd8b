from yandex_token.api.auth import router as auth_router
from yandex_token.api.system import router as system_router

__all__ = ["auth_router", "system_router"]
