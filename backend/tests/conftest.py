import json
import os

import boto3
import pytest
from moto import mock_aws
from unittest.mock import MagicMock

from relay.config import RelayConfig
from relay.gemini_client import GeminiClient

TEST_API_KEY = "AIza-test-key-123"


@pytest.fixture(scope="function")
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture(scope="function")
def secrets_client(aws_credentials):
    with mock_aws():
        yield boto3.client("secretsmanager", region_name="us-east-1")


@pytest.fixture(scope="function")
def gemini_env(monkeypatch):
    """Ambiente limpo: só a chave de teste, sem variáveis herdadas da máquina."""
    for var in ("GEMINI_API_KEY_SECRET_ARN", "GEMINI_MODEL", "GEMINI_API_BASE_URL",
                "GEMINI_TIMEOUT_SECONDS", "GEMINI_KEY_TRANSPORT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", TEST_API_KEY)


def _make_http_response(status_code=200, payload=None, text=None):
    """Simulacro de requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    if payload is not None:
        response.json.return_value = payload
        response.text = json.dumps(payload)
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
        response.text = text or ""
    return response


def _gemini_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def mock_session():
    session = MagicMock()
    session.post.return_value = _make_http_response(200, _gemini_payload("Hello world"))
    return session


@pytest.fixture
def relay_config():
    return RelayConfig(api_key=TEST_API_KEY)


@pytest.fixture
def gemini_client(relay_config, mock_session):
    return GeminiClient(relay_config, session=mock_session)


@pytest.fixture
def api_key():
    return TEST_API_KEY


@pytest.fixture
def http_response():
    """Fábrica de respostas HTTP falsas: http_response(status, payload=None, text=None)."""
    return _make_http_response


@pytest.fixture
def gemini_payload():
    """Fábrica do JSON de sucesso do generateContent com um único candidato."""
    return _gemini_payload
