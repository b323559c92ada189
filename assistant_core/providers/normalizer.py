"""Provider 响应解析。

grounding 元数据只有在 Provider 实际调用了检索工具时才会出现，
因此这里对每一层字段都按“可能缺失”处理：缺了就返回空值，而不是抛错。
"""

from typing import Any, Dict, List, Optional

from assistant_core.domain.models import (
    GroundingResult,
    MapsSource,
    ReviewSnippet,
    SourceChunk,
    WebSource,
)


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _first_candidate(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    candidates = _as_list(data.get("candidates"))
    if not candidates:
        return {}
    first = candidates[0]
    return first if isinstance(first, dict) else {}


def extract_text(data: Any) -> str:
    """拼接首个候选中的文本 part，忽略 thought part；没有则返回 ""。"""

    content = _first_candidate(data).get("content") or {}
    if not isinstance(content, dict):
        return ""
    parts = _as_list(content.get("parts"))
    texts: List[str] = []
    for part in parts:
        if not isinstance(part, dict) or part.get("thought"):
            continue
        text = part.get("text")
        if isinstance(text, str):
            texts.append(text)
    return "".join(texts)


def _review_snippets(maps: Dict[str, Any]) -> List[ReviewSnippet]:
    snippets: List[ReviewSnippet] = []
    for source in _as_list(maps.get("placeAnswerSources")):
        if not isinstance(source, dict):
            continue
        for snippet in _as_list(source.get("reviewSnippets")):
            if isinstance(snippet, dict):
                snippets.append(ReviewSnippet(uri=snippet.get("uri") or "", text=snippet.get("text") or ""))
    return snippets


def parse_chunk(chunk: Any) -> Optional[SourceChunk]:
    """单个 groundingChunk -> WebSource / MapsSource，两者都不是时返回 None。"""

    if not isinstance(chunk, dict):
        return None
    web = chunk.get("web")
    if isinstance(web, dict):
        return WebSource(uri=web.get("uri") or "", title=web.get("title") or "")
    maps = chunk.get("maps")
    if isinstance(maps, dict):
        return MapsSource(
            uri=maps.get("uri") or "",
            title=maps.get("title") or "",
            review_snippets=_review_snippets(maps),
        )
    return None


def extract_sources(data: Any) -> List[SourceChunk]:
    metadata = _first_candidate(data).get("groundingMetadata") or {}
    if not isinstance(metadata, dict):
        return []
    sources: List[SourceChunk] = []
    for chunk in _as_list(metadata.get("groundingChunks")):
        parsed = parse_chunk(chunk)
        if parsed is not None:
            sources.append(parsed)
    return sources


def normalize_grounding(data: Any) -> GroundingResult:
    return GroundingResult(text=extract_text(data), sources=extract_sources(data))
