from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SHADMANAGER_", extra="ignore")

    organization_name: str = "ShadManager"
    app_url: str = "http://localhost:3000"
    email_accent_color: str = "#f07f1d"

    pix_key: str = ""
    pix_merchant_name: str = "Shad Manager"
    pix_merchant_city: str = "Sao Paulo"
    pix_txid: str = "SHADMENSAL"
    pix_description: str = ""

    membership_cache_ttl: int = 60  # seconds

    log_level: str = "INFO"
    log_json: bool = False


settings = Settings()
