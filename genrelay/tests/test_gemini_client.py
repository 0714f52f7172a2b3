import base64
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from genrelay.generation_service.gemini_client import GeminiGenerator, InlineData


def _response(text, parts=None):
    content = SimpleNamespace(parts=parts or [])
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(content=content)])


def _image_part(data, mime_type="image/png"):
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type))


@pytest.fixture
def genai_client():
    return MagicMock()


@pytest.fixture
def gemini(genai_client):
    return GeminiGenerator(api_key="k", model_name="gemini-test", client=genai_client)


def test_generate_text_only(gemini, genai_client):
    genai_client.models.generate_content.return_value = _response("hello")

    result = gemini.generate(["Say hi"])

    assert result.text == "hello"
    assert result.image is None
    kwargs = genai_client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert len(kwargs["contents"]) == 1
    assert kwargs["contents"][0].text == "Say hi"


def test_generate_sends_inline_data(gemini, genai_client):
    genai_client.models.generate_content.return_value = _response("it is a cat")

    gemini.generate(["What is this?", InlineData(b"\x89PNGdata", "image/png")])

    contents = genai_client.models.generate_content.call_args.kwargs["contents"]
    assert contents[0].text == "What is this?"
    assert contents[1].inline_data.data == b"\x89PNGdata"
    assert contents[1].inline_data.mime_type == "image/png"


def test_generate_returns_first_image_as_base64(gemini, genai_client):
    genai_client.models.generate_content.return_value = _response(
        "here you go",
        parts=[
            SimpleNamespace(inline_data=None),
            _image_part(b"audio", mime_type="audio/wav"),
            _image_part(b"first"),
            _image_part(b"second"),
        ],
    )

    result = gemini.generate(["draw"])

    assert result.image == base64.b64encode(b"first").decode("ascii")


def test_generate_empty_text(gemini, genai_client):
    genai_client.models.generate_content.return_value = SimpleNamespace(text=None, candidates=None)

    result = gemini.generate(["blocked prompt"])

    assert result.text == ""
    assert result.image is None


def test_generate_propagates_errors(gemini, genai_client):
    genai_client.models.generate_content.side_effect = RuntimeError("API key not valid")

    with pytest.raises(RuntimeError, match="API key not valid"):
        gemini.generate(["hi"])
    genai_client.models.generate_content.assert_called_once()


def test_client_built_with_timeout(mocker):
    client_cls = mocker.patch("genrelay.generation_service.gemini_client.genai.Client")

    GeminiGenerator(api_key="secret", timeout_ms=5000)

    kwargs = client_cls.call_args.kwargs
    assert kwargs["api_key"] == "secret"
    assert kwargs["http_options"].timeout == 5000


def test_client_built_without_timeout(mocker):
    client_cls = mocker.patch("genrelay.generation_service.gemini_client.genai.Client")

    GeminiGenerator(api_key="secret", timeout_ms=None)

    assert client_cls.call_args.kwargs["http_options"] is None
