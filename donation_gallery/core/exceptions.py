class GalleryError(Exception):
    """Base class for failures that end up as a status line for the user."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ConfigUnavailable(GalleryError):
    def __init__(self, detail: str = "Could not read commissionRate/imagePrice/recipient. "
                 "Check the contract address or the wallet network."):
        super().__init__(detail)


class ContractInterfaceMismatch(ConfigUnavailable):
    def __init__(self, address: str, missing: list[str]):
        self.address = address
        self.missing = missing
        super().__init__(
            f"Contract at {address} does not expose the DonationPlatform interface "
            f"(missing: {', '.join(missing)})"
        )


class ValidationError(GalleryError):
    pass


class BelowMinimumPrice(ValidationError):
    def __init__(self, offered: str, minimum: str, currency: str = "ETH"):
        self.offered = offered
        self.minimum = minimum
        super().__init__(
            f"The price you set ({offered} {currency}) is lower than the minimum price "
            f"configured in the contract ({minimum} {currency})."
        )


class StorageUnavailable(GalleryError):
    def __init__(self, detail: str = "Error uploading the image to IPFS."):
        super().__init__(detail)


class PurchaseRejected(GalleryError):
    def __init__(self, detail: str = "The wallet declined the transaction."):
        super().__init__(detail)


class NetworkError(GalleryError):
    def __init__(self, detail: str = "The transaction could not be submitted or confirmed."):
        super().__init__(detail)


class WorkflowBusy(GalleryError):
    def __init__(self, workflow: str):
        self.workflow = workflow
        article = "An" if workflow[:1].lower() in "aeiou" else "A"
        super().__init__(f"{article} {workflow} is already in progress.")


class ListingNotFoundError(GalleryError):
    def __init__(self, listing_id: int):
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id} not found")
