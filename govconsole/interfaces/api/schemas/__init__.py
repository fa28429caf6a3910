from .auth import CustomTokenRequest, IdentityRead, SessionToken
from .client_config import ClientConfigRead
from .rule import RuleRead, RuleSuggestionRequest, RuleSuggestionResponse, RuleWrite
from .violation import ViolationCreate, ViolationRead

__all__ = [
    "ClientConfigRead",
    "CustomTokenRequest",
    "IdentityRead",
    "RuleRead",
    "RuleSuggestionRequest",
    "RuleSuggestionResponse",
    "RuleWrite",
    "SessionToken",
    "ViolationCreate",
    "ViolationRead",
]
