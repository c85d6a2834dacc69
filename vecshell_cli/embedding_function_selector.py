"""Builds the embedding-function configuration from the trailing tokens of ``collection new``."""

from typing import Callable, Dict, Optional, Sequence

from vecshell_data_model.data_models import KnownEmbeddingFunctionConfiguration
from vecshell_exception_model.exception import UnrecognizedEmbeddingFunctionException

UNRECOGNIZED_EMBEDDING_FUNCTION_MESSAGE = "unrecognized embedding function"

DEFAULT_OLLAMA_URL = "http://localhost:8000"
DEFAULT_OLLAMA_TIMEOUT = 60

# A builder receives the tokens after the family name and returns None when they do not fit
EmbeddingFunctionBuilder = Callable[[Sequence[str]], Optional[KnownEmbeddingFunctionConfiguration]]


def _build_ollama(args: Sequence[str]) -> Optional[KnownEmbeddingFunctionConfiguration]:
    if len(args) != 1:
        return None
    return KnownEmbeddingFunctionConfiguration(
        name="ollama",
        config={
            "url": DEFAULT_OLLAMA_URL,
            "model_name": args[0],
            "timeout": DEFAULT_OLLAMA_TIMEOUT,
        },
    )


_EMBEDDING_FUNCTION_BUILDERS: Dict[str, EmbeddingFunctionBuilder] = {
    "ollama": _build_ollama,
}


def select_embedding_function(tokens: Sequence[str]) -> Optional[KnownEmbeddingFunctionConfiguration]:
    """
    Turn the trailing tokens into an embedding-function configuration.

    Args:
        tokens: Tokens following ``collection new <tenant> <db> <collection>``.

    Returns:
        None for an empty slice, so the service default applies.

    Raises:
        UnrecognizedEmbeddingFunctionException: for any other slice no builder accepts.
    """
    if not tokens:
        return None
    builder = _EMBEDDING_FUNCTION_BUILDERS.get(tokens[0])
    ef = builder(tokens[1:]) if builder else None
    if ef is None:
        raise UnrecognizedEmbeddingFunctionException(UNRECOGNIZED_EMBEDDING_FUNCTION_MESSAGE, list(tokens))
    return ef
