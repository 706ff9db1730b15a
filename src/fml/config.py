from pydantic import BaseModel
import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    log_level: str = os.getenv("FML_LOG_LEVEL", "WARNING").upper()

    # Let object fields fall back to declared enum/object names,
    # the same way feature variables do.
    object_field_fallback: bool = _env_flag("FML_OBJECT_FIELD_FALLBACK")

    cors_origins: list[str] = os.getenv(
        "FML_CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    ).split(",")


settings = Settings()
