from typing import ClassVar


class Defaults:
    MAX_EXPANSION_SIZE = 500
    MAX_IMPORT_DEPTH = 16
    RESOURCES_DIR = "resources"
    CONFIG_FILE = "fhir_terminology.toml"
    SUGGESTION_LIMIT = 3
    SUGGESTION_CUTOFF = 0.8


class Parameters:
    VERSION = "version"
    VERSION_QUERY = "?version="


class Uris:
    IDENTIFIER_PREFIX = "urn:uuid:"
    ABSTRACT_PROPERTY = "notSelectable"


class FilterOps:
    EQUALS = "="
    IS_A = "is-a"
    DESCENDENT_OF = "descendent-of"
    IS_NOT_A = "is-not-a"
    REGEX = "regex"
    IN = "in"
    NOT_IN = "not-in"
    EXISTS = "exists"
    SUPPORTED: ClassVar[frozenset[str]] = frozenset(
        {EQUALS, IS_A, DESCENDENT_OF, IS_NOT_A, REGEX, IN, NOT_IN, EXISTS}
    )


class FilterProperties:
    CODE: ClassVar[frozenset[str]] = frozenset({"concept", "code"})
    DISPLAY = "display"
    ABSTRACT: ClassVar[frozenset[str]] = frozenset({"abstract", "notSelectable"})


class ResourceFiles:
    JSON_PATTERN = "*.json"
    CSV_PATTERN = "*.csv"
