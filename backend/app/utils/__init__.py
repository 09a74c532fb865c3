"""Utility modules"""
from .logger import get_logger, setup_logging
from .jwt import AccessTokenService, get_token_service, extract_bearer_token
from .idgen import generate_id, generate_correlation_id
from .time import utc_now, parse_iso, coerce_utc

__all__ = [
    "get_logger",
    "setup_logging",
    "AccessTokenService",
    "get_token_service",
    "extract_bearer_token",
    "generate_id",
    "generate_correlation_id",
    "utc_now",
    "parse_iso",
    "coerce_utc",
]
