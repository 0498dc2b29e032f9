from pydantic import BaseModel


class ContractInfoResponse(BaseModel):
    contract_address: str
    loaded: bool
    recipient: str
    commission_rate: int
    minimum_price: str | None = None
    currency: str


class WalletConnectResponse(BaseModel):
    connected: bool
    wallet_address: str | None = None
    status: str
    contract: ContractInfoResponse
