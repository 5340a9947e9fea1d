from pydantic_settings import BaseSettings, SettingsConfigDict

from flippit.domain.entities.credentials import Credentials


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # eBay application keys (developer.ebay.com → Application Keys)
    ebay_env: str = "sandbox"
    ebay_client_id: str = ""
    ebay_client_secret: str = ""
    ebay_refresh_token: str = ""
    ebay_runame: str = ""
    ebay_oauth_scope: str = "https://api.ebay.com/oauth/api_scope"

    # Trading API headers
    ebay_site_id: str = "0"
    ebay_compatibility_level: str = "1237"

    # AddFixedPriceItem constants
    ebay_category_id: str = "31387"
    ebay_currency: str = "USD"
    ebay_country: str = "US"
    ebay_site: str = "US"
    ebay_postal_code: str = "95125"
    ebay_dispatch_time_max: int = 3
    ebay_listing_duration: str = "GTC"
    ebay_shipping_service: str = "USPSPriority"
    ebay_shipping_cost: str = "25.00"

    http_timeout_seconds: float = 30.0

    # Listing copy generation
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    app_version: str = "1.0.0"
    log_level: str = "INFO"

    @property
    def is_sandbox(self) -> bool:
        return self.ebay_env.strip().lower() == "sandbox"

    @property
    def ebay_api_base_url(self) -> str:
        return "https://api.sandbox.ebay.com" if self.is_sandbox else "https://api.ebay.com"

    @property
    def ebay_auth_base_url(self) -> str:
        return "https://auth.sandbox.ebay.com" if self.is_sandbox else "https://auth.ebay.com"

    @property
    def ebay_item_base_url(self) -> str:
        return "https://sandbox.ebay.com/itm" if self.is_sandbox else "https://www.ebay.com/itm"

    @property
    def ebay_token_url(self) -> str:
        return f"{self.ebay_api_base_url}/identity/v1/oauth2/token"

    @property
    def ebay_trading_url(self) -> str:
        return f"{self.ebay_api_base_url}/ws/api.dll"

    @property
    def ebay_credentials(self) -> Credentials:
        return Credentials(
            client_id=self.ebay_client_id.strip(),
            client_secret=self.ebay_client_secret.strip(),
            refresh_token=self.ebay_refresh_token.strip(),
        )


settings = Settings()
