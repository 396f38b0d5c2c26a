"""Outbound connector for the bonds API."""

from .client import BondsApiError, BondsApiOfflineError, BondsClient
