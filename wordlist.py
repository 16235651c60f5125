# Parse uploaded word-list text into Word entries.

import logging
import os
import re
from typing import List, NamedTuple, Optional

import chardet

import constants
from errors import ValidationError

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"^[a-zA-Z]+$")
# word, optional part-of-speech marker such as "n." / "adj." / "v.t.", meaning
_POS_LINE_RE = re.compile(r"^([a-zA-Z]+)(?:\s+[a-zA-Z.]+\.)?\s+(.+)$")
_LEADING_WORD_RE = re.compile(r"^([a-zA-Z]+)")


class Word(NamedTuple):
    word: str
    meaning: str


def _split_first_space(line: str) -> Optional[Word]:
    idx = line.find(" ")
    if idx <= 0:
        return None
    word = line[:idx]
    meaning = line[idx + 1:].strip()
    if not _WORD_RE.match(word) or not meaning:
        return None
    return Word(word, meaning)


def _match_pos_line(line: str) -> Optional[Word]:
    m = _POS_LINE_RE.match(line)
    if not m:
        return None
    meaning = m.group(2).strip()
    return Word(m.group(1), meaning) if meaning else None


def _match_leading_word(line: str) -> Optional[Word]:
    m = _LEADING_WORD_RE.match(line)
    if not m:
        return None
    word = m.group(1)
    meaning = line[len(word):].strip()
    return Word(word, meaning) if meaning else None


_LINE_RULES = (_split_first_space, _match_pos_line, _match_leading_word)


def parse_line(line: str) -> Optional[Word]:
    """Parse one trimmed line; the first rule that accepts it wins."""
    for rule in _LINE_RULES:
        entry = rule(line)
        if entry is not None:
            return entry
    return None


def parse_word_list(raw_text: Optional[str]) -> List[Word]:
    """Parse a plain-text word list, one entry per line.

    Supported layouts:
      - ``apple 苹果`` / ``apple n. 苹果`` (word, space, meaning)
      - ``apple\\tn. 苹果`` (word, optional part of speech, meaning)
      - ``apple苹果`` (leading letters are the word)
    Lines matching none of these are skipped; this never raises.
    """
    text = (raw_text or "").replace("\r\n", "\n").replace("\r", "\n")
    words: List[Word] = []
    for line_no, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line:
            continue
        entry = parse_line(line)
        if entry is None:
            logger.debug("Could not parse line %d: %r", line_no, line)
            continue
        words.append(entry)

    logger.info("Parsed %d words from word list", len(words))
    return words


def decode_word_file(bytes_data: bytes) -> str:
    """Decode uploaded bytes, detecting the encoding with chardet."""
    if bytes_data.startswith(b"\xef\xbb\xbf"):
        return bytes_data[3:].decode("utf-8", errors="replace")

    detected = chardet.detect(bytes_data)
    encoding = detected.get("encoding")
    if encoding and (detected.get("confidence") or 0) > constants.ENCODING_MIN_CONFIDENCE:
        try:
            return bytes_data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug("chardet guess %s failed, trying fallback encodings", encoding)

    for encoding in constants.ENCODING_PRIORITY:
        try:
            return bytes_data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return bytes_data.decode("latin-1", errors="replace")


def load_word_file(file_name: str, bytes_data: bytes) -> List[Word]:
    """Validate an uploaded word-list file and parse it.

    Raises ValidationError for a wrong file type, an oversized file, or a
    file in which no line could be parsed.
    """
    suffix = os.path.splitext(file_name or "")[1].lower()
    if suffix not in constants.ALLOWED_UPLOAD_SUFFIXES:
        raise ValidationError("请上传 txt 文件")
    if len(bytes_data) > constants.MAX_UPLOAD_BYTES:
        raise ValidationError(f"文件过大（上限 {constants.MAX_UPLOAD_MB} MB）")

    words = parse_word_list(decode_word_file(bytes_data))
    if not words:
        raise ValidationError("未识别到任何单词，请检查文件格式：单词 释义（每行一个）")
    return words
