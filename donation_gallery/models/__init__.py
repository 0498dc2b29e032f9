from donation_gallery.models.contract import ContractConfig, TransactionReceipt
from donation_gallery.models.listing import Listing, UploadDraft

__all__ = ["ContractConfig", "Listing", "TransactionReceipt", "UploadDraft"]
