from dataclasses import dataclass


@dataclass(frozen=True)
class Credentials:
    """eBay application keys plus the seller's long-lived refresh token."""

    client_id: str
    client_secret: str
    refresh_token: str

    def missing_fields(self) -> list[str]:
        return [name for name, value in self._as_env().items() if not value]

    def _as_env(self) -> dict[str, str]:
        return {
            "EBAY_CLIENT_ID": self.client_id,
            "EBAY_CLIENT_SECRET": self.client_secret,
            "EBAY_REFRESH_TOKEN": self.refresh_token,
        }


@dataclass(frozen=True)
class CachedToken:
    value: str
    expires_at: int  # epoch milliseconds

    def is_fresh(self, now_ms: int, margin_ms: int) -> bool:
        return now_ms < self.expires_at - margin_ms
