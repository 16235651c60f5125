# AI-generated reading passages built from a random sample of the word list.
# 提示词模板见 prompts.py，可直接修改。

import html
import json
import logging
import random
import re
import time
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

import openai
from openai import OpenAI

import constants
from config import get_config, require_ai_config
from errors import FormatError, UpstreamError, ValidationError
from prompts import ARTICLE_PROMPT_TEMPLATE
from retry import CancelToken, RetryPolicy, call_with_retry
from wordlist import Word

logger = logging.getLogger(__name__)

_OPENAI_CLIENT: Optional[Any] = None
_OPENAI_CLIENT_KEY: Optional[Tuple[str, str]] = None

_ARTICLE_FIELD_RE = re.compile(r'article["\s]*:["\s]*([\s\S]*?)(?="?translation"?\s*:|\Z)', re.IGNORECASE)
_TRANSLATION_FIELD_RE = re.compile(r'translation["\s]*:["\s]*([\s\S]*)\Z', re.IGNORECASE)
_FIELD_TRIM_CHARS = " \t\r\n\"',{}"
_TOKEN_SPLIT_RE = re.compile(r"(\s+|[.,!?;:])")


class ArticleResult(NamedTuple):
    article: str
    translation: str
    words: Tuple[Word, ...] = ()


def get_openai_client(cfg: Optional[Dict[str, str]] = None) -> Any:
    """Get the OpenAI-compatible client for the configured endpoint (cached).

    Client-level retries are disabled; retries are handled by call_with_retry.
    """
    global _OPENAI_CLIENT, _OPENAI_CLIENT_KEY
    cfg = cfg or require_ai_config()
    key = (cfg["ai_api_url"], cfg["ai_api_key"])
    if _OPENAI_CLIENT is not None and _OPENAI_CLIENT_KEY == key:
        return _OPENAI_CLIENT

    _OPENAI_CLIENT = OpenAI(
        api_key=cfg["ai_api_key"],
        base_url=cfg["ai_api_url"],
        timeout=constants.REQUEST_TIMEOUT_SECONDS,
        max_retries=0,
    )
    _OPENAI_CLIENT_KEY = key
    return _OPENAI_CLIENT


def select_words(words: Sequence[Word], count: int, rng: Optional[random.Random] = None) -> List[Word]:
    """Validate ``count`` and draw that many words uniformly at random."""
    if not words:
        raise ValidationError("请先上传单词文件")
    if count < 1:
        raise ValidationError("单词数量至少为 1")
    if count > len(words):
        raise ValidationError(f"单词数量不能超过{len(words)}个")
    return (rng or random).sample(list(words), count)


def build_article_prompt(selected: Sequence[Word]) -> str:
    return ARTICLE_PROMPT_TEMPLATE.format(
        word_list=", ".join(w.word for w in selected),
        min_length=constants.ARTICLE_MIN_LENGTH,
        max_length=constants.ARTICLE_MAX_LENGTH,
    )


def _first_balanced_object(text: str) -> Optional[str]:
    """Return the substring from the first '{' to its matching '}', ignoring braces inside strings."""
    start = text.find("{")
    if start < 0:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def _load_json_object(candidate: Optional[str]) -> Optional[Dict[str, Any]]:
    if not candidate:
        return None
    try:
        # strict=False: models often put raw newlines inside string values
        data = json.loads(candidate, strict=False)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _field_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _extract_by_markers(content: str) -> Dict[str, str]:
    article_match = _ARTICLE_FIELD_RE.search(content)
    translation_match = _TRANSLATION_FIELD_RE.search(content)
    return {
        "article": article_match.group(1).strip(_FIELD_TRIM_CHARS) if article_match else "",
        "translation": translation_match.group(1).strip(_FIELD_TRIM_CHARS) if translation_match else "",
    }


def parse_article_content(content: str) -> Tuple[str, str]:
    """Coerce a freeform AI reply into (article, translation).

    Tries, in order: the first balanced ``{...}`` block as JSON, the whole
    reply as JSON, then text following ``article`` / ``translation`` markers.
    Raises FormatError when either field is still missing.
    """
    text = content or ""
    data = _load_json_object(_first_balanced_object(text))
    if data is None:
        data = _load_json_object(text.strip())
    if data is None:
        logger.warning("AI reply is not valid JSON, falling back to marker extraction")
        data = _extract_by_markers(text)

    article = _field_text(data.get("article"))
    translation = _field_text(data.get("translation"))
    if not article or not translation:
        raise FormatError("AI返回的数据格式不正确")
    return article, translation


def _response_text(response: Any) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return (getattr(message, "content", None) or "").strip()


def request_article_text(
    client: Any,
    model: str,
    prompt: str,
    policy: Optional[RetryPolicy] = None,
    sleep=time.sleep,
) -> str:
    """Send the prompt to the chat-completion endpoint and return the reply text.

    Connection failures and timeouts are retried according to ``policy``;
    an HTTP error status fails immediately.
    """
    policy = policy or RetryPolicy()

    def _attempt(token: CancelToken) -> Any:
        return client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=constants.ARTICLE_TEMPERATURE,
            max_tokens=constants.ARTICLE_MAX_TOKENS,
            timeout=token.remaining(),
        )

    try:
        response = call_with_retry(
            _attempt,
            policy=policy,
            retry_on=(openai.APIConnectionError,),
            sleep=sleep,
        )
    except openai.APIConnectionError as e:
        raise UpstreamError(f"AI API请求失败，已重试{policy.max_retries}次", body=str(e)) from e
    except openai.APIStatusError as e:
        body = ""
        if getattr(e, "response", None) is not None:
            body = e.response.text
        logger.error("AI API returned status %s: %s", e.status_code, body[:300])
        raise UpstreamError("AI API请求失败", status=e.status_code, body=body) from e

    usage = getattr(response, "usage", None)
    logger.info("AI API response ok (model=%s, usage=%s)", model, usage)

    content = _response_text(response)
    if not content:
        raise UpstreamError("AI返回内容为空")
    return content


def generate_article(
    words: Sequence[Word],
    count: int,
    client: Any = None,
    model: Optional[str] = None,
    rng: Optional[random.Random] = None,
    policy: Optional[RetryPolicy] = None,
    sleep=time.sleep,
) -> ArticleResult:
    """Pick ``count`` random words and ask the AI for an article using all of them.

    Every call re-selects words and re-queries; nothing is cached.
    """
    selected = select_words(words, count, rng)
    prompt = build_article_prompt(selected)

    if client is None:
        cfg = require_ai_config()
        client = get_openai_client(cfg)
        model = model or cfg["ai_model"]
    model = model or get_config()["ai_model"]

    logger.info("Requesting article for %d words (model=%s)", len(selected), model)
    content = request_article_text(client, model, prompt, policy=policy, sleep=sleep)
    article, translation = parse_article_content(content)
    return ArticleResult(article, translation, tuple(selected))


def highlight_segments(text: str, words: Sequence[Word]) -> List[Tuple[str, Optional[str]]]:
    """Split article text into (segment, matched word or None), keeping separators."""
    lookup = {w.word.lower(): w.word for w in words}
    segments: List[Tuple[str, Optional[str]]] = []
    for part in _TOKEN_SPLIT_RE.split(text or ""):
        if not part:
            continue
        segments.append((part, lookup.get(part.strip().lower()) if part.strip() else None))
    return segments


def render_article_html(text: str, words: Sequence[Word], active: Optional[str] = None) -> str:
    """Render article text as escaped HTML with the sampled words wrapped in <mark>."""
    active_key = active.lower() if active else None
    out: List[str] = []
    for segment, matched in highlight_segments(text, words):
        escaped = html.escape(segment)
        if matched is None:
            out.append(escaped)
            continue
        css = "word-hit active" if matched.lower() == active_key else "word-hit"
        out.append(f'<mark class="{css}">{escaped}</mark>')
    return "".join(out)
