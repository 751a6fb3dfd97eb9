"""Rule-based answers used when the LLM is disabled or unavailable.

Answers are assembled from lines of the retrieved chunks that match simple
keyword rules chosen by the kind of question (process, time, contact).
"""

from minirag.textutils import split_sentences, truncate_text
from minirag.vectorstore.models import SearchResult

NO_RESULTS_ANSWER = "抱歉，没有找到相关信息。"
NOTHING_EXTRACTED_ANSWER = "文档中没有找到明确的相关信息。"

PROCESS_QUERY_KEYWORDS = ("流程", "步骤", "怎么", "如何")
TIME_QUERY_KEYWORDS = ("时间", "多久")
CONTACT_QUERY_KEYWORDS = ("联系", "电话", "邮箱", "客服")

STEP_PREFIXES = ("1.", "2.", "3.", "4.", "5.", "6.", "a.", "b.", "c.", "d.")
STEP_KEYWORDS = ("第一步", "第二步", "登录", "进入", "选择", "点击", "提交", "等待")
TIME_KEYWORDS = ("工作日", "小时", "天", "分钟", "时间", "审核", "到账", "期限")
CONTACT_KEYWORDS = ("@", "邮箱", "电话", "客服", "400-", "微信", "QQ")

PROCESS_PREVIEW_LENGTH = 200
GENERIC_PREVIEW_LENGTH = 150


def _clean_lines(content: str) -> list[str]:
    return [line.strip() for line in content.split("\n") if line.strip()]


def extract_process_steps(content: str) -> str:
    """Lines that look like procedure steps, or the first sentence if none do."""
    steps = [
        line
        for line in _clean_lines(content)
        if line.startswith(STEP_PREFIXES) or any(k in line for k in STEP_KEYWORDS)
    ]
    if steps:
        return "\n".join(steps)

    sentences = split_sentences(content)
    return sentences[0] if sentences else ""


def extract_time_info(content: str) -> str:
    """Lines mentioning durations or deadlines, joined with ``; ``."""
    return "; ".join(
        line for line in _clean_lines(content) if any(k in line for k in TIME_KEYWORDS)
    )


def extract_contact_info(content: str) -> str:
    """Lines carrying contact details, joined with ``; ``."""
    return "; ".join(
        line
        for line in _clean_lines(content)
        if any(k in line for k in CONTACT_KEYWORDS)
    )


def generate_fallback_answer(query: str, results: list[SearchResult]) -> str:
    """Build an answer from ``results`` without calling a model.

    Args:
        query: The user question; its keywords pick the extraction rule.
        results: Retrieved chunks, best first.

    Returns:
        Answer text.
    """
    if not results:
        return NO_RESULTS_ANSWER

    lowered = query.lower()
    lines: list[str] = []

    if any(k in lowered for k in PROCESS_QUERY_KEYWORDS):
        header = "根据文档内容，相关流程如下：\n\n"
        for i, result in enumerate(results, start=1):
            steps = extract_process_steps(result.document.content)
            if steps:
                lines.append(f"{i}. {truncate_text(steps, PROCESS_PREVIEW_LENGTH)}\n")

    elif any(k in lowered for k in TIME_QUERY_KEYWORDS):
        header = "根据文档中的时间信息：\n\n"
        for result in results:
            info = extract_time_info(result.document.content)
            if info:
                lines.append(f"• {info}\n")

    elif any(k in lowered for k in CONTACT_QUERY_KEYWORDS):
        header = "根据文档中的联系方式：\n\n"
        for result in results:
            info = extract_contact_info(result.document.content)
            if info:
                lines.append(f"• {info}\n")

    else:
        header = "根据文档信息：\n\n"
        for i, result in enumerate(results, start=1):
            preview = truncate_text(result.document.content, GENERIC_PREVIEW_LENGTH)
            lines.append(f"{i}. {preview}\n\n")

    if not lines:
        return NOTHING_EXTRACTED_ANSWER
    return header + "".join(lines)
