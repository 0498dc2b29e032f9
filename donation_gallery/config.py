import logging
import warnings

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment
    environment: str = "development"  # development | test | production
    log_level: str = "INFO"

    # Server
    gallery_host: str = "0.0.0.0"
    gallery_port: int = 8000

    # Payments
    payment_mode: str = "simulated"  # simulated | testnet | mainnet
    wallet_rpc_url: str = "http://127.0.0.1:8545"
    donation_contract_address: str = "0xB6CA37e7c6114d4E661b425A5DCbcFd334dB7b97"
    confirmation_timeout_seconds: float = 120.0
    currency_symbol: str = "ETH"

    # Shown in the gallery until the contract configuration has been read
    default_commission_rate: int = 10
    default_recipient: str = "0x9ca138540fd77eaf4e82bc51eed9b81c647a5c2b"
    default_asking_price: str = "0.01"

    # Simulated contract values (PAYMENT_MODE=simulated)
    simulated_commission_rate: int = 10
    simulated_recipient: str = "0x9ca138540fd77eaf4e82bc51eed9b81c647a5c2b"
    simulated_image_price_wei: int = 10**16  # 0.01 ETH

    # Content storage
    storage_mode: str = "local"  # local | kubo
    ipfs_api_url: str = "http://127.0.0.1:5001/api/v0"
    ipfs_gateway_url: str = "http://127.0.0.1:8080"
    ipfs_publish_dir: str = "/"
    ipfs_timeout_seconds: float = 30.0
    content_store_path: str = "./data/content_store"
    local_gateway_url: str = "http://127.0.0.1:8000"
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()

_logger = logging.getLogger("donation_gallery.config")


def validate_settings(cfg: Settings) -> None:
    is_prod = cfg.environment.lower() in {"production", "prod"}

    if cfg.payment_mode not in {"simulated", "testnet", "mainnet"}:
        raise RuntimeError(
            f"FATAL: PAYMENT_MODE must be simulated, testnet or mainnet (got '{cfg.payment_mode}')."
        )
    if cfg.storage_mode not in {"local", "kubo"}:
        raise RuntimeError(
            f"FATAL: STORAGE_MODE must be local or kubo (got '{cfg.storage_mode}')."
        )

    if cfg.payment_mode == "simulated":
        if is_prod:
            raise RuntimeError(
                "FATAL: PAYMENT_MODE=simulated cannot be used in production. "
                "Set PAYMENT_MODE=testnet or PAYMENT_MODE=mainnet and point WALLET_RPC_URL at a real node."
            )
        warnings.warn(
            "PAYMENT_MODE is 'simulated': purchases will not reach any blockchain.",
            stacklevel=1,
        )

    if not 0 <= cfg.default_commission_rate <= 100:
        raise RuntimeError("FATAL: DEFAULT_COMMISSION_RATE must be between 0 and 100.")

    if cfg.cors_origins == "*":
        _logger.warning(
            "CORS_ORIGINS is set to '*' (allow all). "
            "Configure specific origins for production via the CORS_ORIGINS environment variable."
        )
