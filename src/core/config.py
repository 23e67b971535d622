from pydantic import Field
from pydantic_settings import BaseSettings

VISION_PARSER_API_URL = "https://api.visionparser.com/parse/image/file"
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB


class Settings(BaseSettings):
    app_name: str = Field("invoice-reader", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Vision Parser
    vision_parser_api_key: str | None = Field(default=None, alias="VISION_PARSER_API_KEY")
    vision_parser_api_url: str = Field(VISION_PARSER_API_URL, alias="VISION_PARSER_API_URL")
    # Set to false only for endpoints behind an intercepting proxy; never in production
    vision_parser_verify_tls: bool = Field(True, alias="VISION_PARSER_VERIFY_TLS")
    vision_parser_timeout: float = Field(120.0, alias="VISION_PARSER_TIMEOUT")

    # Uploads
    upload_dir: str = Field("tmp", alias="UPLOAD_DIR")
    max_upload_bytes: int = Field(MAX_FILE_SIZE, alias="MAX_UPLOAD_BYTES")

    # Presenter -> relay (the relay may be deployed separately)
    relay_url: str = Field("http://127.0.0.1:8000/api/parse-invoice", alias="RELAY_URL")
    relay_timeout: float = Field(180.0, alias="RELAY_TIMEOUT")

    # CORS allowed origins (comma-separated list for production deployment)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

settings = Settings()
