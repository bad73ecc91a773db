import dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=dotenv.find_dotenv(usecwd=True) or None,
        env_prefix="cfpp_",
        extra="ignore",
    )

    # site
    site_name: str = "WordPress"
    site_url: str = "http://localhost"
    admin_email: str = ""
    site_id: str = "default"

    # settings storage
    keyring_service: str = "cf-pdf-purge"

    # mail
    smtp_host: str = "localhost"
    smtp_port: int = 25
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_from: str | None = None
    smtp_starttls: bool = False
    smtp_timeout: float = 10.0

    # debug
    verbose: bool = False

    @property
    def mail_sender(self) -> str:
        return self.smtp_from or self.admin_email or f"wordpress@{self.site_host}"

    @property
    def site_host(self) -> str:
        host = self.site_url.split("://", 1)[-1]
        return host.split("/", 1)[0] or "localhost"


env = EnvSettings()
