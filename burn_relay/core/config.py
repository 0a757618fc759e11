from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Burn Relay"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    ETHEREUM_RPC: str = "https://sepolia.infura.io/v3/YOUR_INFURA_KEY"
    CONTRACT_ADDRESS: str
    PRIVATE_KEY: str
    CONTRACT_ABI: str

    # Sepolia. Never read from the node so signed bytes stay reproducible.
    CHAIN_ID: int = 11155111
    # Sized for emitBurn(bytes32,address)
    GAS_LIMIT: int = 100000

    STRICT_INPUT_DECODING: bool = False
    SERIALIZE_SUBMISSIONS: bool = True
    LOG_LEVEL: str = "INFO"

    # This configures Pydantic to read variables from the ".env" file
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("CONTRACT_ADDRESS", "PRIVATE_KEY", "CONTRACT_ABI")
    @classmethod
    def required_not_blank(cls, value: str, info) -> str:
        if not value or not value.strip():
            raise ValueError(f"{info.field_name} is required")
        return value.strip()


def get_settings() -> Settings:
    """Load settings from the environment and the optional .env file."""
    return Settings()
