from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    version: str
    payment_mode: str
    storage_mode: str
    listings_count: int
    contract_config_loaded: bool


class StatusResponse(BaseModel):
    status: str
    wallet_address: str | None = None
