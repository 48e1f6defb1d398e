"""
ContextBuilder - Appends file and URL content to a prompt.

The layout of the appended block is what the model sees, so it is fixed:

    <prompt>

    Context from sources:
    Source: notes.txt
    <file text>

    ---

    Source: https://example.com
    <page text>
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..constants import CONTEXT_SEPARATOR
from ..io_handlers.file_loader import FileLoader
from ..io_handlers.url_fetcher import FetchRetriever, UrlRetriever


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextSource:
    """A place to pull context from.

    Attributes:
        kind: "file" or "url".
        location: The path or URL, as given by the user.
    """
    kind: str
    location: str


@dataclass(frozen=True)
class RetrievedContent:
    """Text retrieved from one context source.

    Attributes:
        label: The original path or URL.
        text: The file text, or the sanitized page text.
    """
    label: str
    text: str

    def render(self) -> str:
        return f"Source: {self.label}\n{self.text}"


def context_sources(files: Sequence[str], urls: Sequence[str]) -> list[ContextSource]:
    """Order the sources the way they are rendered: files, then URLs."""
    return (
        [ContextSource("file", path) for path in files]
        + [ContextSource("url", url) for url in urls]
    )


def format_context(prompt: str, contents: Sequence[RetrievedContent]) -> str:
    """Append retrieved contents to a prompt.

    Args:
        prompt: The prompt text (variables already substituted).
        contents: Retrieved sources in render order.

    Returns:
        The prompt unchanged when `contents` is empty, otherwise the prompt
        followed by a labeled context block.
    """
    if not contents:
        return prompt

    label = "Context from source:" if len(contents) == 1 else "Context from sources:"
    items = CONTEXT_SEPARATOR.join(content.render() for content in contents)
    return f"{prompt}\n\n{label}\n{items}"


class ContextBuilder:
    """Retrieves context sources and appends them to a prompt.

    Sources are retrieved one after another in render order; the first
    failure aborts the build with the SourceError of that source.

    Example:
        builder = ContextBuilder(url_retriever=select_retriever("chrome"))
        prompt = await builder.build("Summarize", files=["a.txt"], urls=[])
    """

    def __init__(
        self,
        file_loader: Optional[FileLoader] = None,
        url_retriever: Optional[UrlRetriever] = None,
    ) -> None:
        """Initialize the ContextBuilder.

        Args:
            file_loader: Reads --file sources.
            url_retriever: Retrieval strategy for --url sources.
        """
        self._file_loader = file_loader or FileLoader()
        self._url_retriever = url_retriever or FetchRetriever()

    async def retrieve(self, source: ContextSource) -> RetrievedContent:
        """Retrieve a single source."""
        if source.kind == "file":
            text = await asyncio.to_thread(self._file_loader.load, source.location)
        else:
            text = await self._url_retriever.fetch(source.location)
        return RetrievedContent(label=source.location, text=text)

    async def build(
        self,
        prompt: str,
        files: Sequence[str] = (),
        urls: Sequence[str] = (),
    ) -> str:
        """Build the final prompt text.

        Args:
            prompt: The prompt text.
            files: File paths, in the order given.
            urls: URLs, in the order given.

        Returns:
            The prompt with the context block appended.

        Raises:
            SourceError: If any source cannot be retrieved.
        """
        contents: list[RetrievedContent] = []
        for source in context_sources(files, urls):
            contents.append(await self.retrieve(source))

        if contents:
            logger.debug(f"Assembled context from {len(contents)} source(s)")
        return format_context(prompt, contents)
