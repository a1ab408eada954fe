"""Centralized FastAPI dependency type aliases.

Import these ``*Dep`` aliases in route modules instead of manually
writing ``Annotated[T, Depends(get_xxx)]`` everywhere.  Each alias
corresponds to a single ``get_*`` factory and can be overridden in
tests via ``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends

from wikichat.core.service import (
    RagChatService,
    SuggestionService,
    get_chat_service,
    get_suggestion_service,
)
from wikichat.infra.errors import ErrorReporter, get_error_reporter

ChatServiceDep = Annotated[RagChatService, Depends(get_chat_service)]
SuggestionServiceDep = Annotated[SuggestionService, Depends(get_suggestion_service)]
ErrorReporterDep = Annotated[ErrorReporter, Depends(get_error_reporter)]
