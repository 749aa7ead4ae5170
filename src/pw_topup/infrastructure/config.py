"""Gateway configuration, built once from settings and injected."""

from dataclasses import dataclass

from config.settings import Settings


@dataclass(frozen=True)
class GatewayConfig:
    key_id: str
    key_secret: str
    api_base: str = "https://api.razorpay.com/v1"
    timeout_seconds: float = 10.0
    currency: str = "INR"
    min_amount_paise: int = 100

    @property
    def configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    @classmethod
    def from_settings(cls, s: Settings) -> "GatewayConfig":
        return cls(
            key_id=s.RAZORPAY_KEY_ID,
            key_secret=s.RAZORPAY_KEY_SECRET,
            api_base=s.RAZORPAY_API_BASE,
            timeout_seconds=s.RAZORPAY_TIMEOUT_SECONDS,
            currency=s.TOPUP_CURRENCY,
            min_amount_paise=s.TOPUP_MIN_AMOUNT_PAISE,
        )
