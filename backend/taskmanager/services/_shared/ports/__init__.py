from .token_provider import ACCESS, REFRESH, TokenProvider

__all__ = ["ACCESS", "REFRESH", "TokenProvider"]
