import json

import requests

from relay.errors import ConfigurationError, UnexpectedError, UpstreamError

FALLBACK_TEXT = "Could not generate text."
MAX_ERROR_DETAIL = 500


def build_payload(prompt):
    """Um único turno de usuário, sem histórico entre chamadas."""
    return {
        "contents": [{
            "role": "user",
            "parts": [{"text": prompt}]
        }]
    }


def extract_text(result):
    """
    Lê candidates[0].content.parts[0].text.
    Qualquer campo ausente ou de tipo inesperado devolve None.
    """
    if not isinstance(result, dict):
        return None
    candidates = result.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    if not isinstance(first, dict):
        return None
    content = first.get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts:
        return None
    part = parts[0]
    if not isinstance(part, dict):
        return None
    text = part.get("text")
    if not isinstance(text, str) or not text:
        return None
    return text


def redact(text, secret):
    if secret:
        text = text.replace(secret, "[REDACTED]")
    return text


class GeminiClient:
    """
    Encaminha o prompt para o endpoint generateContent via REST.
    A sessão HTTP é injetável (testes usam MagicMock).
    """

    def __init__(self, config, session=None):
        self.config = config
        self.session = session if session else requests.Session()

    def _request_args(self):
        headers = {"Content-Type": "application/json"}
        params = None
        if self.config.key_transport == "query":
            params = {"key": self.config.api_key}
        else:
            headers["x-goog-api-key"] = self.config.api_key
        return headers, params

    def generate_text(self, prompt):
        if not self.config or not self.config.api_key:
            raise ConfigurationError("GEMINI_API_KEY missing")

        headers, params = self._request_args()

        print("Sending request to Gemini API...")
        try:
            response = self.session.post(
                self.config.endpoint,
                headers=headers,
                params=params,
                data=json.dumps(build_payload(prompt)),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            # A mensagem do requests pode conter a URL com ?key=
            print(f"ERRO DE REDE: {redact(str(e), self.config.api_key)}")
            raise UnexpectedError("Network failure") from e

        print(f"Received response from Gemini API with status: {response.status_code}")

        if not 200 <= response.status_code < 300:
            detail = redact(response.text or "", self.config.api_key).strip()
            print(f"Gemini API Error: {detail}")
            raise UpstreamError(response.status_code, detail[:MAX_ERROR_DETAIL])

        try:
            result = response.json()
        except ValueError as e:
            print("ERRO: resposta do Gemini não é JSON válido.")
            raise UnexpectedError("Invalid upstream JSON") from e

        text = extract_text(result)
        if text is None:
            print(
                "Warning: Gemini response was successful but contained no text. "
                f"Full response: {json.dumps(result)}"
            )
            return FALLBACK_TEXT

        print("Successfully extracted text from Gemini response.")
        return text
