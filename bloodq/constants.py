"""All magic values live here — no inline literals anywhere else."""

# Provider identifiers
PROVIDER_GEMINI = "gemini"
PROVIDER_OPENAI = "openai"
PROVIDER_CLAUDE = "claude"
PROVIDERS: tuple[str, ...] = (PROVIDER_GEMINI, PROVIDER_OPENAI, PROVIDER_CLAUDE)
DEFAULT_PROVIDER = PROVIDER_GEMINI

PROVIDER_LABELS = {
    PROVIDER_GEMINI: "Gemini",
    PROVIDER_OPENAI: "OpenAI",
    PROVIDER_CLAUDE: "Claude",
}

# Endpoints
GEMINI_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent"
)
OPENAI_ENDPOINT = "https://api.openai.com/v1/chat/completions"
CLAUDE_ENDPOINT = "https://api.anthropic.com/v1/messages"

# Request parameters
GEMINI_IMAGE_MIME_TYPE = "image/jpeg"
OPENAI_VISION_MODEL = "gpt-4-vision-preview"
CLAUDE_VISION_MODEL = "claude-3-opus-20240229"
CLAUDE_API_VERSION = "2023-06-01"
ANALYSIS_TEMPERATURE = 0.1
ANALYSIS_MAX_TOKENS = 2048

CONTENT_TYPE_JSON = "application/json"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CLAUDE_API_KEY = "x-api-key"
HEADER_CLAUDE_VERSION = "anthropic-version"

# Inbound per-provider key headers
CALLER_KEY_HEADERS = {
    PROVIDER_GEMINI: "x-gemini-key",
    PROVIDER_OPENAI: "x-openai-key",
    PROVIDER_CLAUDE: "x-claude-key",
}

ANALYSIS_PROMPT = """
You are a medical expert analyzing a blood test result. 
Examine the image of the blood test results and provide a detailed analysis including:

1. A summary of the test results
2. Identification of any abnormal values and their significance
3. Potential health implications based on these results
4. General recommendations (NOT medical advice)

Present this information in a clear, organized format.
"""
CONTEXT_SUFFIX = "\n\nAdditional context provided by user: %s"

# Analysis failures
MSG_ERR_NO_IMAGE = "No image provided"
MSG_ERR_BAD_IMAGE = "Image must be a base64 data URI"
MSG_ERR_UNSUPPORTED_PROVIDER = "Unsupported provider: %s"
MSG_ERR_NO_API_KEY = "No %s API key provided"
MSG_ERR_API = "API Error (%d): %s"
MSG_ERR_DECODE = "Unexpected %s response: %s"
MSG_ERR_TRANSPORT = "Request failed: %s"
MSG_ERR_UNKNOWN = "Unknown error occurred"

# Log messages
MSG_SERVER_STARTING = "Starting bloodq server on %s:%d…"
MSG_ANALYZING = "→ %s analysis"
MSG_ANALYSIS_OK = "✓ %s analysis (%.1fs)"
MSG_ANALYSIS_FAIL = "✗ %s analysis failed: %s"

# Client-side settings
SETTINGS_STORE_PATH = ".bloodq_user_settings.json"
USAGE_STORE_PATH = ".bloodq_usage_limits.json"
MAX_IMAGES_PER_DAY = 2
USAGE_WINDOW_MS = 24 * 60 * 60 * 1000

# Server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "8000"

# CLI
MSG_LIMIT_REACHED = (
    "You've reached the limit of %d images in 24 hours. Try again in %s "
    "or add your own API key with `bloodq settings --key`."
)
MSG_REMAINING = "%d free analyses remaining today."
MSG_SETTINGS_SAVED = "Settings saved."
MSG_SETTINGS = (
    "Settings\n"
    "  Preferred provider : %s\n"
    "  Gemini key         : %s\n"
    "  OpenAI key         : %s\n"
    "  Claude key         : %s\n"
)
