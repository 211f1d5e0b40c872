from fastapi import APIRouter, Depends
from ...core.config import Settings
from ...core.errors import ValidationError
from ...schemas.ai import SuggestionIn, SuggestionOut
from ...services import provider
from ...services.suggestions import suggest
from ..deps import get_settings

router = APIRouter(prefix="/ai", tags=["ai"])

def get_completer(s: Settings = Depends(get_settings)):
    return lambda prompt: provider.complete(prompt, s)

@router.post("/suggestion", response_model=SuggestionOut)
def suggestion(body: SuggestionIn, complete=Depends(get_completer)):
    if not body.tasks:
        raise ValidationError("Task list is required.")
    text, fallback = suggest(body.tasks, complete)
    return SuggestionOut(suggestion=text, fallback=fallback)
