import base64
import binascii
import json

from relay.errors import ValidationError

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*"
}


def get_method(event):
    """API Gateway REST/Netlify usam httpMethod; HTTP API (v2) usa requestContext."""
    if not isinstance(event, dict):
        return ""
    method = event.get("httpMethod")
    if not method:
        request_context = event.get("requestContext")
        http = request_context.get("http") if isinstance(request_context, dict) else None
        method = http.get("method") if isinstance(http, dict) else None
    if not isinstance(method, str):
        return ""
    return method.upper()


def parse_prompt(event):
    """
    Decodifica o body e devolve o prompt.
    Lança ValidationError para JSON malformado ou prompt ausente.
    """
    raw_body = event.get("body") or ""

    if event.get("isBase64Encoded") and raw_body:
        try:
            raw_body = base64.b64decode(raw_body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValidationError("Bad Request: Invalid JSON body.") from e

    try:
        body = json.loads(raw_body) if raw_body else {}
    except ValueError as e:
        raise ValidationError("Bad Request: Invalid JSON body.") from e

    if not isinstance(body, dict):
        raise ValidationError("Bad Request: Invalid JSON body.")

    prompt = body.get("prompt")
    if not isinstance(prompt, str) or not prompt:
        raise ValidationError()
    return prompt


def json_response(status_code, payload):
    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": json.dumps(payload)
    }


def text_response(status_code, text):
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "text/plain"},
        "body": text
    }


def error_response(error):
    return json_response(error.status_code, error.to_body())
