from .linkedin import LinkedInOAuthClient

__all__ = ["LinkedInOAuthClient"]
