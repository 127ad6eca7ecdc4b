"""Term resolution for flashcards.

Resolves a Japanese word or phrase to a reading and definition, trying the
local dictionary before the Jisho API. Remote results are cached in the
key-value store for 30 days, and concurrent lookups of the same term share
one request.

Key Components:
    - normalize_term: canonical key form of a raw term
    - match_local: exact, light-verb stem and longest-prefix matching
    - JishoClient: cached, deduplicated remote lookups
    - LookupCache: TTL cache persisted as one store record
    - InFlightDeduplicator: per-term sharing of pending lookups
    - TermResolver: the full pipeline

Usage Example:
    from flashcard_tools.config_manager import load_configuration
    from flashcard_tools.lookup import build_resolver
    from flashcard_tools.storage import JsonFileStore

    settings = load_configuration()
    store = JsonFileStore(settings.storage_path)

    async with build_resolver(settings, store) as resolver:
        result = await resolver.resolve("勉強する")
        if result:
            print(result.found_for, result.reading, result.definition)
"""

from .models import (
    DEFINITION_DELIMITER,
    DictionaryEntry,
    LocalMatch,
    LookupOutcome,
    LookupStatus,
    RemoteResult,
    ResolutionResult,
    ResolutionSource,
)

from .normalizer import normalize_term

from .dictionary import (
    DictionarySummary,
    describe_dictionary,
    load_dictionary,
    parse_dictionary,
    parse_entry,
)

from .local_matcher import (
    LIGHT_VERB_SUFFIX,
    match_exact,
    match_light_verb_stem,
    match_local,
    match_longest_prefix,
)

from .cache import LookupCache, epoch_ms
from .inflight import InFlightDeduplicator
from .jisho_client import JishoClient, parse_jisho_data
from .resolver import TermResolver, build_resolver

__all__ = [
    # Models
    "DEFINITION_DELIMITER",
    "DictionaryEntry",
    "LocalMatch",
    "LookupOutcome",
    "LookupStatus",
    "RemoteResult",
    "ResolutionResult",
    "ResolutionSource",
    # Normalization
    "normalize_term",
    # Local dictionary
    "DictionarySummary",
    "LIGHT_VERB_SUFFIX",
    "describe_dictionary",
    "load_dictionary",
    "match_exact",
    "match_light_verb_stem",
    "match_local",
    "match_longest_prefix",
    "parse_dictionary",
    "parse_entry",
    # Remote lookup
    "InFlightDeduplicator",
    "JishoClient",
    "LookupCache",
    "epoch_ms",
    "parse_jisho_data",
    # Resolution
    "TermResolver",
    "build_resolver",
]
