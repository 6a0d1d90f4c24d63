"""Exception classes shared by the templating core and the CLI.

Contains:
- PrxError: Base exception for everything raised by prx itself
- ConfigError: Malformed configuration (patterns, templates, separators, providers)
- PatternError: A branch pattern cannot be compiled
- TemplateError: A template cannot be parsed or fails while rendering
- NoMatchError: A branch name does not satisfy the configured pattern
- UnresolvedPlaceholderError: A pattern references a placeholder without a fragment
- MissingFieldError: A strict template references a field that is not set
- ExternalCallError: The commits fetcher or AI summarizer callback failed
- InteractionError: The user cancelled a prompt or the prompt I/O failed
"""


class PrxError(Exception):
    """Base exception for prx errors."""

    pass


class ConfigError(PrxError):
    """Raised when user configuration is invalid."""

    pass


class PatternError(ConfigError):
    """Raised when a branch pattern does not compile to a valid regular expression."""

    def __init__(self, message: str, pattern: str):
        super().__init__(message)
        self.pattern = pattern


class TemplateError(ConfigError):
    """Raised when a template is malformed or fails for a reason other than a missing key."""

    def __init__(self, message: str, template: str = ""):
        super().__init__(message)
        self.template = template


class NoMatchError(PrxError):
    """Raised when a branch name does not match the configured pattern."""

    def __init__(self, message: str, pattern: str, name: str = ""):
        super().__init__(message)
        self.pattern = pattern
        self.name = name


class UnresolvedPlaceholderError(PatternError, NoMatchError):
    """Raised when a pattern uses a placeholder that has no regex fragment.

    Such a pattern can never match a branch name, so this is both a
    configuration problem and a failed match.
    """

    def __init__(self, message: str, pattern: str, placeholders: list[str]):
        PrxError.__init__(self, message)
        self.pattern = pattern
        self.name = ""
        self.placeholders = placeholders


class MissingFieldError(PrxError):
    """Raised when a strict template references a field that is absent."""

    def __init__(self, key: str, template: str = ""):
        super().__init__(f"Template references missing field '{key}'")
        self.key = key
        self.template = template


class ExternalCallError(PrxError):
    """Raised when an injected callback (commits fetcher, AI summarizer) fails."""

    def __init__(self, source: str, cause: Exception):
        super().__init__(f"Failed to {source}: {cause}")
        self.source = source
        self.cause = cause


class InteractionError(PrxError):
    """Raised when the user cancels a prompt or the prompt cannot be shown."""

    pass
