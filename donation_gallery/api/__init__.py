"""API router registry used by the app factory."""

from __future__ import annotations

from fastapi import APIRouter

from . import content, health, listings, purchases, wallet

API_PREFIX = "/api/v1"

API_ROUTERS: tuple[APIRouter, ...] = (
    health.router,
    wallet.router,
    listings.router,
    purchases.router,
)

# Mounted without a prefix so retrieval URLs look like <gateway>/ipfs/<cid>
ROOT_ROUTERS: tuple[APIRouter, ...] = (content.router,)
