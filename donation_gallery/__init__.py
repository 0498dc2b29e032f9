"""Donation Gallery: IPFS image listings paid through a donation-splitting contract."""

__version__ = "0.1.0"
