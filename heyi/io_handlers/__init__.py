"""I/O handlers for heyi."""
from .file_loader import FileLoader
from .stdin_reader import has_stdin_data, read_stdin
from .url_fetcher import (
    BrowserRetriever,
    FetchRetriever,
    UrlRetriever,
    html_to_text,
    is_browser_path,
    select_retriever,
    validate_url,
)

__all__ = [
    'FileLoader',
    'has_stdin_data', 'read_stdin',
    'UrlRetriever', 'FetchRetriever', 'BrowserRetriever',
    'html_to_text', 'is_browser_path', 'select_retriever', 'validate_url',
]
