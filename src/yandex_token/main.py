"""
Main entry point for the Yandex token authentication service.
"""
import sys

from dotenv import load_dotenv
import uvicorn
from yandex_token.clients.oauth import validate_client_credentials, OAuthConfigurationError
from yandex_token.settings import get_settings

# Load environment variables from a .env file if present
load_dotenv()


def main() -> None:
    """Main entry point for running the application."""
    s = get_settings()
    try:
        validate_client_credentials(s.strategy.client_id, s.strategy.client_secret)
    except OAuthConfigurationError as exc:
        sys.exit(
            f"[yandex-token-auth] {exc}. Set YANDEX_TOKEN_STRATEGY__CLIENT_ID and "
            "YANDEX_TOKEN_STRATEGY__CLIENT_SECRET."
        )

    uvicorn.run(
        "yandex_token.app:create_app",
        factory=True,
        host=s.server.host,
        port=s.server.port,
        reload=s.server.reload,
        log_level=s.server.log_level,
    )


if __name__ == "__main__":
    main()
