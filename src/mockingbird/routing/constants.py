"""Fixed vocabularies for convention-named mock files."""

# HTTP verbs a mock file can declare with a ``.<method>`` suffix
HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"})

METHOD_SUFFIXES = frozenset(method.lower() for method in HTTP_METHODS)

# Data files default to GET when the name carries no method suffix
DATA_EXTENSIONS = frozenset({".json", ".jsonc"})

MODULE_EXTENSIONS = frozenset({".py"})

SUPPORTED_EXTENSIONS = DATA_EXTENSIONS | MODULE_EXTENSIONS

# Tried in order when looking for a directory config file
CONFIG_EXTENSIONS: tuple[str, ...] = (".py",)

CONFIG_STEM = "index.config"

# Type stubs never become routes or configs
DECLARATION_SUFFIX = ".pyi"

DEFAULT_EXCLUDED_DIRS = frozenset({".git", "__pycache__", "node_modules"})

DEFAULT_IGNORE_PREFIX: tuple[str, ...] = (".",)
