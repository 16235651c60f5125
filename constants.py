# Constants and configuration for Word Drill.

APP_TITLE = "只背单词"
APP_SUBTITLE = "智能单词学习，高效记忆掌握"

# Word-list upload
MAX_UPLOAD_MB = 5
MAX_UPLOAD_BYTES = MAX_UPLOAD_MB * 1024 * 1024
ALLOWED_UPLOAD_SUFFIXES = (".txt",)
ENCODING_PRIORITY = ['utf-8', 'gb18030', 'latin-1']
ENCODING_MIN_CONFIDENCE = 0.7
MAX_PASTE_TEXT_LENGTH = 500_000

# Learning sessions
DEFAULT_SAMPLE_SIZE = 10
MODE_MEMORIZE = "memorize"
MODE_PRACTICE = "practice"

# Article generation
DEFAULT_ARTICLE_WORD_COUNT = 10
ARTICLE_MIN_LENGTH = 200
ARTICLE_MAX_LENGTH = 300
ARTICLE_TEMPERATURE = 0.7
ARTICLE_MAX_TOKENS = 1000
REQUEST_TIMEOUT_SECONDS = 30.0
MAX_RETRIES = 2               # 网络失败最多重试 2 次（共 3 次请求）
RETRY_BACKOFF_SECONDS = 1.0   # 线性退避：1s, 2s

# OpenAI-compatible API defaults (single source of truth for config.py)
DEFAULT_AI_MODEL = "Qwen/Qwen3-8B"

# ---- Rate limiting (generous – designed to stop bots, not humans) ----
RL_ARTICLE_PER_MINUTE = 5
RL_ARTICLE_PER_HOUR = 40
RL_ARTICLE_PER_DAY = 150

DEFAULT_SESSION_STATE = {
    'words': [],
    'word_source_name': "",
    'active_mode': "upload",
    'memorize_size': DEFAULT_SAMPLE_SIZE,
    'practice_size': DEFAULT_SAMPLE_SIZE,
    'article_size': DEFAULT_ARTICLE_WORD_COUNT,
    'article_result': None,
    'article_error': "",
    'highlighted_word': None,
}
