"""
Taxonomia de erros do relay.
Cada erro sabe qual status HTTP e qual mensagem pública devolver ao cliente.
Detalhes internos nunca saem daqui para o corpo da resposta.
"""


class RelayError(Exception):
    status_code = 500
    public_message = "Internal Server Error"

    def to_body(self):
        return {"error": self.public_message}


class ValidationError(RelayError):
    """Erro causado pelo cliente (payload inválido ou sem prompt)."""
    status_code = 400

    def __init__(self, public_message="Bad Request: No prompt provided."):
        super().__init__(public_message)
        self.public_message = public_message


class ConfigurationError(RelayError):
    """Credencial ausente ou ilegível. A causa real fica só no log."""
    status_code = 500
    public_message = "Server configuration error."


class UpstreamError(RelayError):
    """Gemini respondeu fora da faixa 2xx. O status original é repassado."""
    base_message = "Failed to fetch from Gemini API"

    def __init__(self, status_code, detail=""):
        super().__init__(f"Gemini API HTTP {status_code}")
        self.status_code = status_code
        self.detail = detail
        self.public_message = (
            f"{self.base_message}: {detail}" if detail else self.base_message
        )


class UnexpectedError(RelayError):
    """Falha de rede, timeout ou resposta ilegível do upstream."""
    status_code = 500
    public_message = "Internal Server Error"
