"""FluentAI article client: editing, AI enrichment and search over the FluentAI REST API."""

from .api import ApiError, AuthContext, AuthRequiredError
from .content_service import ContentService
from .editor import EditorSession, EditorState
from .enrichment_service import EnrichmentService
from .list_mutation import ListMutationCoordinator
from .models import Article, DraftState, SearchCriteria, normalize_tags
from .search import SearchQueryController, SearchState

__all__ = [
    "ApiError",
    "Article",
    "AuthContext",
    "AuthRequiredError",
    "ContentService",
    "DraftState",
    "EditorSession",
    "EditorState",
    "EnrichmentService",
    "ListMutationCoordinator",
    "SearchCriteria",
    "SearchQueryController",
    "SearchState",
    "normalize_tags",
]
