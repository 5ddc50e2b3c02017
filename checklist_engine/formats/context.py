"""
Shared, read-only context handed to every codec.

The context bundles the mapping tables, the markup configuration and the
per-codec settings derived from the engine configuration. The default context
is built when this module is imported, so conversions never read the
configuration file, and it is never mutated, so concurrent conversions can
share a single instance.
"""
import codecs
import logging
from dataclasses import dataclass, field
from typing import Optional

from checklist_engine.config import get_config
from checklist_engine.formats.mapping import DEFAULT_TABLES, MappingTables
from checklist_engine.formats.utils.markup_dialect import MarkupConfig, config_from_settings
from checklist_engine.types.common import EngineConfig

logger = logging.getLogger(__name__)

# Global context cache
_cached_context: Optional["CodecContext"] = None


@dataclass(frozen=True)
class CodecContext:
    """Immutable settings shared by all codecs."""

    tables: MappingTables = DEFAULT_TABLES
    markup: MarkupConfig = field(default_factory=MarkupConfig)
    text_encoding: str = "latin-1"
    container_archive: bool = False
    container_indent: int = 2
    content_filename: str = "content.json"
    native_indent: int = 2


def _check_single_byte(encoding: str) -> str:
    try:
        name = codecs.lookup(encoding).name
    except LookupError:
        raise ValueError(f"Unknown text encoding: {encoding}") from None
    for code in range(256):
        encoded = chr(code).encode(name, errors="ignore")
        if len(encoded) > 1:
            raise ValueError(f"Text encoding must use one byte per character: {encoding}")
    return name


def build_context(config: Optional[EngineConfig] = None) -> CodecContext:
    """
    Build a codec context from an engine configuration.

    Args:
        config: Engine configuration, defaults to the cached configuration

    Returns:
        Immutable codec context

    Raises:
        ValueError: If a configured value is unusable
    """
    if config is None:
        config = get_config()

    binary = config.get("binary", {})
    container = config.get("container", {})
    markup = config.get("markup", {})
    native = config.get("native", {})

    defaults = CodecContext()
    context = CodecContext(
        tables=DEFAULT_TABLES,
        markup=config_from_settings(
            root_tag=markup.get("root_tag", defaults.markup.root_tag),
            attribute_prefix=markup.get("attribute_prefix", defaults.markup.attribute_prefix),
            text_key=markup.get("text_key", defaults.markup.text_key),
            always_array=markup.get("always_array", ()),
        ),
        text_encoding=_check_single_byte(binary.get("text_encoding", defaults.text_encoding)),
        container_archive=bool(container.get("archive", defaults.container_archive)),
        container_indent=int(container.get("indent", defaults.container_indent)),
        content_filename=str(container.get("content_filename", defaults.content_filename)),
        native_indent=int(native.get("indent", defaults.native_indent)),
    )
    logger.debug(f"Built codec context (encoding={context.text_encoding}, archive={context.container_archive})")
    return context


def get_default_context(reload: bool = False) -> CodecContext:
    """
    Get the codec context built from the default configuration at import.

    Args:
        reload: Force the configuration to be reloaded from disk

    Returns:
        Shared codec context
    """
    global _cached_context

    if _cached_context is None or reload:
        _cached_context = build_context(get_config(reload=reload))

    return _cached_context


# Built at import so no conversion reads configuration from disk
_cached_context = build_context()
