"""
Runs one heyi invocation.

The pipeline is: pick the prompt template, merge options, fill in template
variables, append file and URL context, ask the model under the output
contract, and render the answer.
"""
import logging
import sys
from typing import Callable, Optional, TextIO

from .config import AppConfig
from .errors import InputError
from .io_handlers.file_loader import FileLoader
from .io_handlers.stdin_reader import has_stdin_data, read_stdin
from .io_handlers.url_fetcher import UrlRetriever, select_retriever
from .llm.base import LLMProvider
from .llm.openrouter import OpenRouterProvider
from .output.contract import OutputContract
from .prompts.builder import ContextBuilder
from .prompts.preset import FlagOptions, load_preset, merge_options
from .prompts.variables import Placeholder, find_missing, resolve_missing, substitute
from .utils import truncate_string


logger = logging.getLogger(__name__)


class Runner:
    """
    Executes prompts against the configured model.

    Example:
        runner = Runner(load_config())
        answer = await runner.run("Capital of {{country}}?", FlagOptions(variables={"country": "France"}))
    """

    def __init__(
        self,
        config: AppConfig,
        provider: Optional[LLMProvider] = None,
        ask: Optional[Callable[[Placeholder], str]] = None,
        stdin: Optional[TextIO] = None,
        file_loader: Optional[FileLoader] = None,
        retriever_factory: Callable[[str], UrlRetriever] = select_retriever,
    ) -> None:
        """
        Args:
            config: Environment configuration
            provider: Model provider (OpenRouter by default)
            ask: Asks the user for a missing variable value
            stdin: Stream to read piped prompts from (defaults to sys.stdin)
            file_loader: Reads --file sources
            retriever_factory: Maps a crawler token to a URL retriever
        """
        self._config = config
        self._provider = provider
        self._ask = ask
        self._stdin = stdin
        self._file_loader = file_loader or FileLoader()
        self._retriever_factory = retriever_factory

    @property
    def provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = OpenRouterProvider(api_key=self._config.api_key)
        return self._provider

    async def run(
        self,
        prompt: Optional[str],
        flags: FlagOptions,
        preset_path: Optional[str] = None,
    ) -> str:
        """
        Run a prompt end to end.

        Args:
            prompt: Prompt template from the command line, if any
            flags: Options from the command line
            preset_path: Preset file to merge with the flags (preset mode)

        Returns:
            The rendered answer

        Raises:
            HeyiError: On any input, source, preset, schema or reply problem
            httpx.HTTPError: If the provider request fails
        """
        preset = load_preset(preset_path) if preset_path else None
        options = merge_options(flags, preset, self._config)
        contract = OutputContract.from_options(options.format, options.schema)

        if not prompt and preset is not None:
            prompt = preset.prompt
        template, from_stdin = self._read_template(prompt)

        variables = dict(options.variables)
        missing = find_missing(template, variables)
        if missing:
            variables.update(self._collect(missing, from_stdin))

        text = substitute(template, variables)
        builder = ContextBuilder(
            file_loader=self._file_loader,
            url_retriever=self._retriever_factory(options.crawler),
        )
        final_prompt = await builder.build(text, options.files, options.urls)

        return await self.execute(final_prompt, options.model, contract)

    async def execute(self, prompt: str, model: str, contract: OutputContract) -> str:
        """
        Send a final prompt to the model and render the validated answer.

        Args:
            prompt: Final prompt text
            model: Model identifier
            contract: Expected response shape

        Returns:
            The rendered answer
        """
        logger.debug(
            f"Asking {model} for {contract.format.value}: "
            f"{truncate_string(prompt.replace(chr(10), ' '), 80)!r}"
        )
        response = await self.provider.chat(
            messages=[{"role": "user", "content": prompt}],
            model=model,
            response_format=contract.response_format(),
        )
        value = contract.parse_reply(response.content)
        return contract.render(value)

    def _read_template(self, prompt: Optional[str]) -> tuple[str, bool]:
        """Return the template and whether it was read from stdin."""
        if prompt:
            return prompt, False

        stdin = self._stdin or sys.stdin
        if has_stdin_data(stdin):
            text = read_stdin(stdin)
            if text:
                return text, True

        raise InputError("A prompt is required. Provide it as an argument or via stdin.")

    def _collect(self, missing: list[Placeholder], from_stdin: bool) -> dict[str, str]:
        """Ask the user for missing variables, if a terminal is available."""
        stdin = self._stdin or sys.stdin
        interactive = not from_stdin and not has_stdin_data(stdin)
        if self._ask is None or not interactive:
            names = ", ".join(p.name for p in missing)
            raise InputError(
                f"Missing values for variables: {names}. "
                "Provide them with --var key=value."
            )
        return resolve_missing(missing, self._ask)
