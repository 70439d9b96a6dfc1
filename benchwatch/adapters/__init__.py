"""Outbound adapters: the HTTP probe primitive and status page client."""

from .http_probe import HttpProbe
from .status_page import StatusPageClient, parse_status_page

__all__ = ["HttpProbe", "StatusPageClient", "parse_status_page"]
