from yandex_token.app.factory import create_app

__all__ = ["create_app"]
