"""
Constants and configuration defaults for heyi.
"""
from typing import Final

APP_NAME: Final[str] = "heyi"
APP_VERSION: Final[str] = "1.0.0"
APP_DESCRIPTION: Final[str] = "Ask an LLM from the command line and get a typed answer back"

API_KEY_ENV: Final[str] = "HEYI_API_KEY"
MODEL_ENV: Final[str] = "HEYI_MODEL"
CRAWLER_ENV: Final[str] = "HEYI_CRAWLER"

DEFAULT_MODEL: Final[str] = "openai/gpt-4o-mini"
DEFAULT_FORMAT: Final[str] = "string"
DEFAULT_CRAWLER: Final[str] = "fetch"

CHROME_CRAWLER: Final[str] = "chrome"

OUTPUT_FORMATS: Final[tuple[str, ...]] = ("string", "number", "object", "array")

OPENROUTER_BASE_URL: Final[str] = "https://openrouter.ai/api/v1"
PROVIDER_TIMEOUT_SECONDS: Final[float] = 120.0
FETCH_TIMEOUT_SECONDS: Final[float] = 30.0
NETWORK_IDLE_TIMEOUT_MS: Final[int] = 10_000

# Chromium flags needed inside containers and CI sandboxes
BROWSER_ARGS: Final[tuple[str, ...]] = ("--no-sandbox", "--disable-setuid-sandbox")

CONTEXT_SEPARATOR: Final[str] = "\n\n---\n\n"

HELP_EPILOG: Final[str] = """
Examples:
  $ heyi "What is the capital of France?"
  $ heyi "What is quantum computing?" --model google/gemini-2.5-pro

  # Different output formats
  $ heyi "List 5 programming languages" --format array --schema "z.string()"
  $ heyi "Analyze this data" --format object --schema "z.object({revenue: z.number(), costs: z.number()})"
  $ heyi "List 3 countries" --format array --schema "z.object({name: z.string(), capital: z.string()})"

  # Variable replacement
  $ heyi "Translate to {{language}}" --var language="German"
  $ heyi "Translate from {{input}} to {{output}}" --var input="German" --var output="English"
  $ echo "Translate to {{lang}}" | heyi --var lang="Spanish"
  $ heyi "Summarize for {{audience description=\\"Who will read this?\\"}}"

  # Environment variables
  $ HEYI_MODEL=perplexity/sonar heyi "Explain AI"
  $ HEYI_API_KEY=your-key heyi "Hello, AI!"

  # Input from stdin, files, or URLs
  $ heyi "Summarize this content" --file input.txt
  $ heyi "Compare these files" --file a.txt --file b.txt
  $ heyi "Summarize this article" --url https://example.com/article.html
  $ heyi "Summarize this app" --url https://example.com/spa --crawler chrome
  $ cat prompt.txt | heyi

  # Presets
  $ heyi preset summarize.json --file notes.txt
"""
