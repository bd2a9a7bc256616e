import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "9000"))
    api_url: str = os.getenv("API_URL", f"http://localhost:{os.getenv('API_PORT', '9000')}")

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Bookshelf API")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    debug: bool = _env_flag("DEBUG")

    # Identifier lengths
    book_id_size: int = int(os.getenv("BOOK_ID_SIZE", "21"))
    book_short_id_size: int = int(os.getenv("BOOK_SHORT_ID_SIZE", "10"))

    # CLI client settings
    client_timeout: float = float(os.getenv("CLIENT_TIMEOUT", "10"))


settings = Settings()
