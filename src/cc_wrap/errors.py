"""Error types for cc-wrap."""


class CCWrapError(Exception):
    """Base exception for cc-wrap errors."""


class ParseError(CCWrapError, ValueError):
    """A document or line could not be decoded.

    Returned (not raised) by the fallible readers in ``cc_wrap.jsonio``.
    """

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class ProviderCredentialError(CCWrapError, RuntimeError):
    """A selected provider is missing its credential. Aborts launch."""

    def __init__(self, provider_name: str, env_var: str):
        super().__init__(
            f"{env_var} environment variable is required for {provider_name} "
            "but is not set or is empty"
        )
        self.provider_name = provider_name
        self.env_var = env_var


class LaunchError(CCWrapError):
    """The assistant process could not be started."""
