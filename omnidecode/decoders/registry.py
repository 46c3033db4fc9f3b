"""Registry mapping environment names to decoder classes."""

import logging
from typing import Callable, Dict, List, Type, Union

from omnidecode.core.exceptions import ConfigurationError
from omnidecode.decoders.base import BaseDecoder, Environment
from omnidecode.decoders.code_decoder import CodeDecoder
from omnidecode.decoders.pointer_decoder import PointerDecoder
from omnidecode.decoders.tool_decoder import ToolDecoder


logger = logging.getLogger(__name__)


_DECODERS: Dict[str, Type[BaseDecoder]] = {
    Environment.CODE.value: CodeDecoder,
    Environment.TOOL.value: ToolDecoder,
    Environment.POINTER.value: PointerDecoder,
}


def environment_key(environment: Union[Environment, str]) -> str:
    """Normalize an environment or environment name into a registry key.

    Built-in names and their aliases resolve to the canonical value; any
    other name is used as-is (lowercased) so custom decoders can register
    new environments.
    """
    try:
        return Environment.from_name(environment).value
    except ConfigurationError:
        return str(environment).strip().lower()


def register_decoder(environment: Union[Environment, str]) -> Callable[[Type[BaseDecoder]], Type[BaseDecoder]]:
    """Class decorator registering a decoder for an environment.

    Args:
        environment: Environment handled by the decorated class.

    Returns:
        Decorator returning the class unchanged.

    Example:
        >>> @register_decoder("shell")
        ... class ShellDecoder(CodeDecoder):
        ...     region_tag = "shell_env"
    """
    key = environment_key(environment)

    def decorator(decoder_class: Type[BaseDecoder]) -> Type[BaseDecoder]:
        if key in _DECODERS and _DECODERS[key] is not decoder_class:
            logger.info(f"Replacing decoder for environment {key!r}: {_DECODERS[key].__name__} -> {decoder_class.__name__}")
        _DECODERS[key] = decoder_class
        return decoder_class

    return decorator


def unregister_decoder(environment: Union[Environment, str]) -> bool:
    """Remove a registered decoder. Returns True if one was removed."""
    return _DECODERS.pop(environment_key(environment), None) is not None


def get_decoder_class(environment: Union[Environment, str]) -> Type[BaseDecoder]:
    """Look up the decoder class for an environment.

    Raises:
        ConfigurationError: If no decoder is registered for the environment.
    """
    key = environment_key(environment)
    try:
        return _DECODERS[key]
    except KeyError:
        raise ConfigurationError(f"No decoder registered for environment {key!r}",
                                 field="environment", value=environment) from None


def available_environments() -> List[str]:
    """Names of all environments with a registered decoder."""
    return sorted(_DECODERS)
