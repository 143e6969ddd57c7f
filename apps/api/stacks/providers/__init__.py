from .accounts import AccountProviderError, GitHubClient, LinkedInClient, get_github_client, get_linkedin_client
from .chat import (
    ChatServiceError,
    ChatRateLimitError,
    ChatAuthError,
    ChatRequestError,
    ChatResponseError,
    ChatProvider,
    get_chat_provider,
)
from .resume_parser import (
    ResumeParserError,
    ResumeParserConfigError,
    ResumeParserResponseError,
    LetrazResumeParser,
    get_resume_parser,
)

__all__ = [
    "AccountProviderError",
    "GitHubClient",
    "LinkedInClient",
    "get_github_client",
    "get_linkedin_client",
    "ChatServiceError",
    "ChatRateLimitError",
    "ChatAuthError",
    "ChatRequestError",
    "ChatResponseError",
    "ChatProvider",
    "get_chat_provider",
    "ResumeParserError",
    "ResumeParserConfigError",
    "ResumeParserResponseError",
    "LetrazResumeParser",
    "get_resume_parser",
]
