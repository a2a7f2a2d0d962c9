import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Skill engine settings
    weight_tolerance: float = 0.001  # allowed drift from 1.0 for weight sums
    max_skill_name_length: int = 100
    seed_dictionary: bool = True  # publish the bundled vocabulary on first start
    dictionary_import_path: str = ""  # JSON export loaded (replace mode) at startup
    match_rate_limit: str = "60/minute"  # slowapi limit for batch match endpoints

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "protected_namespaces": ("settings_",)}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
