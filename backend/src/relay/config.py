import json
import math
import os
from dataclasses import dataclass

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from relay.errors import ConfigurationError

DEFAULT_MODEL = "gemini-1.5-flash-latest"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_TIMEOUT_SECONDS = 30.0
KEY_TRANSPORTS = ("header", "query")

# --- Padrão Singleton para o cliente do Secrets Manager ---
_SECRETS_CLIENT = None


def get_secrets_client():
    global _SECRETS_CLIENT
    if _SECRETS_CLIENT is None:
        boto_config = Config(retries={'max_attempts': 3, 'mode': 'standard'})
        _SECRETS_CLIENT = boto3.client("secretsmanager", config=boto_config)
    return _SECRETS_CLIENT


@dataclass(frozen=True)
class RelayConfig:
    """Configuração imutável, montada uma vez por container (cold start)."""
    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    key_transport: str = "header"

    @property
    def endpoint(self):
        return f"{self.base_url.rstrip('/')}/v1beta/models/{self.model}:generateContent"

    def __repr__(self):
        # Nunca imprimir a chave
        return (
            f"RelayConfig(model={self.model!r}, base_url={self.base_url!r}, "
            f"timeout={self.timeout!r}, key_transport={self.key_transport!r})"
        )


def _read_secret(secret_id, secrets_client=None):
    client = secrets_client if secrets_client else get_secrets_client()
    try:
        response = client.get_secret_value(SecretId=secret_id)
    except (BotoCoreError, ClientError) as e:
        print(f"ERRO: falha ao ler segredo {secret_id}: {str(e)}")
        raise ConfigurationError("Secret lookup failed") from e

    secret = response.get("SecretString") or ""
    # O segredo pode ser a chave pura ou um JSON {"GEMINI_API_KEY": "..."}
    if secret.lstrip().startswith("{"):
        try:
            secret = str(json.loads(secret).get("GEMINI_API_KEY") or "")
        except ValueError as e:
            raise ConfigurationError("Secret is not valid JSON") from e
    return secret.strip()


def load_config(environ=None, secrets_client=None):
    """
    Lê as variáveis de ambiente e devolve um RelayConfig.
    Lança ConfigurationError se a credencial não puder ser obtida.
    """
    env = os.environ if environ is None else environ

    api_key = env.get("GEMINI_API_KEY", "").strip()
    secret_arn = env.get("GEMINI_API_KEY_SECRET_ARN", "").strip()
    if not api_key and secret_arn:
        api_key = _read_secret(secret_arn, secrets_client)

    if not api_key:
        print("CRITICAL ERROR: GEMINI_API_KEY environment variable not set or not found.")
        raise ConfigurationError("GEMINI_API_KEY missing")

    key_transport = env.get("GEMINI_KEY_TRANSPORT", "header").strip().lower()
    if key_transport not in KEY_TRANSPORTS:
        print(f"CRITICAL ERROR: GEMINI_KEY_TRANSPORT inválido: {key_transport}")
        raise ConfigurationError("Invalid key transport")

    try:
        timeout = float(env.get("GEMINI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
    except ValueError as e:
        print("CRITICAL ERROR: GEMINI_TIMEOUT_SECONDS não é numérico.")
        raise ConfigurationError("Invalid timeout") from e

    # Também barra nan e inf
    if not (timeout > 0 and math.isfinite(timeout)):
        print(f"CRITICAL ERROR: GEMINI_TIMEOUT_SECONDS deve ser positivo: {timeout}")
        raise ConfigurationError("Invalid timeout")

    return RelayConfig(
        api_key=api_key,
        model=env.get("GEMINI_MODEL") or DEFAULT_MODEL,
        base_url=env.get("GEMINI_API_BASE_URL") or DEFAULT_BASE_URL,
        timeout=timeout,
        key_transport=key_transport,
    )
