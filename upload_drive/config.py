from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


class Settings(BaseSettings):
    # Core
    environment: str = Field(default="dev")
    app_name: str = Field(default="Upload Drive API")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Storage
    storage_provider: str = Field(default="drive", alias="STORAGE_PROVIDER")
    local_storage_dir: str = Field(default="var/storage", alias="LOCAL_STORAGE_DIR")
    http_timeout: float = Field(default=30.0, alias="HTTP_TIMEOUT")

    # Google Drive (OAuth installed-app credentials)
    google_client_id: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_ID")
    google_client_secret: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_SECRET")
    google_refresh_token: Optional[str] = Field(default=None, alias="GOOGLE_REFRESH_TOKEN")
    google_redirect_uri: str = Field(default="urn:ietf:wg:oauth:2.0:oob", alias="GOOGLE_REDIRECT_URI")

    # Mail
    smtp_host: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    mail_user: Optional[str] = Field(default=None, alias="MAIL_USER")
    mail_password: Optional[str] = Field(default=None, alias="MAIL_PWD")

    # Rate limit
    rate_limit: str = Field(default="100/minute", alias="RATE_LIMIT")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True


settings = Settings()
