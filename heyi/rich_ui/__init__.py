"""Rich terminal UI helpers for heyi."""
from .console import format_error, get_err_console, print_error, setup_logging
from .input import VariablePrompter

__all__ = [
    'format_error', 'get_err_console', 'print_error', 'setup_logging',
    'VariablePrompter',
]
