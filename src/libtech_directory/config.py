from typing import List

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Published Google Sheets export of the directory
    csv_url: AnyHttpUrl = (
        "https://docs.google.com/spreadsheets/d/e/"
        "2PACX-1vTrbhCHyINYJMEBbnl_SGBujZOOUB0rw4WnXWirV9dUF_PaktI2oVM0ubMRK6B_Xw"
        "/pub?output=csv"
    )
    request_timeout_seconds: float = 15.0

    page_size: int = Field(default=12, ge=1)
    facet_preview_limit: int = Field(default=5, ge=1)
    search_min_length: int = Field(default=2, ge=1)

    default_locale: str = "fr"
    supported_locales: str = "fr,en"

    load_on_startup: bool = True
    refresh_interval_seconds: float = 0  # 0 disables the periodic reload

    max_browse_sessions: int = 1000
    session_cookie_name: str = "libtech_session"

    model_config = SettingsConfigDict(
        env_prefix="LIBTECH_",
        env_file=".env",
        extra="ignore"
    )

    @property
    def locales(self) -> List[str]:
        return [tag.strip() for tag in self.supported_locales.split(",") if tag.strip()]


settings = Settings()
