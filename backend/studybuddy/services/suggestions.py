import logging
from typing import Callable, Sequence, Tuple

from ..core.errors import ServiceError
from ..schemas.ai import SuggestionTask

logger = logging.getLogger(__name__)

FALLBACK_SUGGESTION = "Không thể tạo gợi ý lúc này."

PROMPT_TEMPLATE = """Bạn là trợ lý học tập AI. Phân tích nhiệm vụ và đưa ra 1 gợi ý cụ thể (2-3 câu) bằng tiếng Việt:

Nhiệm vụ:
{task_lines}

Đưa ra lời khuyên ngắn gọn về: nhiệm vụ cụ thể nào làm trước, cách tổ chức thời gian, hoặc động viên. Kết thúc bằng dấu chấm."""

def build_prompt(tasks: Sequence[SuggestionTask]) -> str:
    lines = [
        f"- {t.title} ({t.priority}, hạn {t.deadline.strftime('%d/%m/%Y')}, {t.status})"
        for t in tasks
    ]
    return PROMPT_TEMPLATE.format(task_lines="\n".join(lines))

def suggest(tasks: Sequence[SuggestionTask], complete: Callable[[str], str]) -> Tuple[str, bool]:
    """Return (suggestion, used_fallback). Provider failures never propagate."""
    try:
        text = complete(build_prompt(tasks)).strip()
    except ServiceError as e:
        logger.warning("AI suggestion failed, using fallback: %s", e)
        return FALLBACK_SUGGESTION, True
    if not text:
        return FALLBACK_SUGGESTION, True
    return text, False
