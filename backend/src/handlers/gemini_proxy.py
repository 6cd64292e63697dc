from relay.config import load_config
from relay.errors import ConfigurationError, RelayError, UnexpectedError
from relay.events import error_response, get_method, json_response, parse_prompt, text_response
from relay.gemini_client import GeminiClient

# --- Padrão Singleton para o cliente Gemini (Warm Start) ---
_GEMINI_CLIENT = None


def get_relay():
    """
    Retorna ou inicializa o GeminiClient.
    Só é cacheado quando a configuração carrega com sucesso, assim uma chave
    corrigida no ambiente vale já na próxima invocação.
    """
    global _GEMINI_CLIENT
    if _GEMINI_CLIENT is None:
        _GEMINI_CLIENT = GeminiClient(load_config())
        print("API key loaded.")
    return _GEMINI_CLIENT


def lambda_handler(event, context, relay=None):
    """
    Proxy de prompt para o Gemini.
    Rota: POST /gemini-proxy  Body: {"prompt": "..."}
    Args:
        relay: GeminiClient opcional para testes (Injeção de Dependência).
    """
    event = event or {}

    if get_method(event) != "POST":
        return text_response(405, "Method Not Allowed")

    print("Function triggered. Processing request...")

    try:
        prompt = parse_prompt(event)
        print(f"Received prompt ({len(prompt)} chars)")

        client = relay if relay else get_relay()
        text = client.generate_text(prompt)

        return json_response(200, {"text": text})

    except ConfigurationError as e:
        print(f"ERRO DE CONFIGURAÇÃO: {str(e)}")
        return error_response(e)

    except RelayError as e:
        print(f"ERRO: {type(e).__name__}: {str(e)}")
        return error_response(e)

    except Exception as e:
        print(f"FATAL Error in function execution: {type(e).__name__}: {str(e)}")
        return error_response(UnexpectedError())
