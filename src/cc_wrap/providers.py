"""Alternative Anthropic-compatible backends the assistant can run against."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from cc_wrap.errors import ProviderCredentialError

# Snapshot of a process environment, passed around explicitly
EnvironmentSnapshot = Mapping[str, str]

AUTH_TOKEN_VAR = "ANTHROPIC_AUTH_TOKEN"
DEFAULT_TIMEOUT_MS = 3_000_000


class ProviderId(str, Enum):
    GLM = "glm"
    MINIMAX = "minimax"
    CHUTES = "chutes"


@dataclass(frozen=True)
class ProviderConfig:
    """A backend: where it lives, which models fill each tier, and its key."""

    name: str
    base_url: str
    fast_model: str
    default_model: str
    premium_model: str
    api_key_env_var: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def credential(self, env: EnvironmentSnapshot) -> str:
        return (env.get(self.api_key_env_var) or "").strip()

    def validate(self, env: EnvironmentSnapshot) -> str:
        """Return the credential, or raise if it is unset or blank."""
        token = self.credential(env)
        if not token:
            raise ProviderCredentialError(self.name, self.api_key_env_var)
        return token

    def environment(self, model: str | None = None) -> dict[str, str]:
        """Runtime variables for this backend.

        ``model`` replaces all three tiers with a single model id.
        """
        return {
            "ANTHROPIC_BASE_URL": self.base_url,
            "API_TIMEOUT_MS": str(self.timeout_ms),
            "ANTHROPIC_DEFAULT_HAIKU_MODEL": model or self.fast_model,
            "ANTHROPIC_DEFAULT_SONNET_MODEL": model or self.default_model,
            "ANTHROPIC_DEFAULT_OPUS_MODEL": model or self.premium_model,
        }


PROVIDERS: dict[ProviderId, ProviderConfig] = {
    ProviderId.GLM: ProviderConfig(
        name="GLM mode",
        base_url="https://api.z.ai/api/anthropic",
        fast_model="glm-4.5-air",
        default_model="glm-4.6",
        premium_model="glm-4.6",
        api_key_env_var="ZAI_API_KEY",
    ),
    ProviderId.MINIMAX: ProviderConfig(
        name="MiniMax M2 mode",
        base_url="https://api.minimax.io/anthropic",
        fast_model="MiniMax-M2",
        default_model="MiniMax-M2",
        premium_model="MiniMax-M2",
        api_key_env_var="MINIMAX_API_KEY",
    ),
    ProviderId.CHUTES: ProviderConfig(
        name="Chutes mode",
        base_url="https://claude.chutes.ai",
        fast_model="deepseek-ai/DeepSeek-V3.2",
        default_model="deepseek-ai/DeepSeek-V3.2",
        premium_model="deepseek-ai/DeepSeek-V3.2",
        api_key_env_var="CHUTES_API_KEY",
        timeout_ms=6_000_000,  # 100 min
    ),
}


def get_provider(provider_id: ProviderId | None) -> ProviderConfig | None:
    if provider_id is None:
        return None
    return PROVIDERS[ProviderId(provider_id)]


def provider_environment(
    provider: ProviderConfig | None,
    env: EnvironmentSnapshot,
    model: str | None = None,
) -> dict[str, str]:
    """Provider variables plus the credential remapped to the generic token var.

    Empty when no provider is selected. Raises ``ProviderCredentialError``
    when the provider's key is missing.
    """
    if provider is None:
        return {}
    token = provider.validate(env)
    return {**provider.environment(model), AUTH_TOKEN_VAR: token}
