import pytest

from genrelay.config import RelayConfig
from genrelay.gateway.server import create_app
from genrelay.generation_service.gemini_client import GenerationResult


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def generator(mocker):
    """
    Stand-in for GeminiGenerator; returns "hi" unless a test overrides it.
    """
    mock_generator = mocker.Mock()
    mock_generator.generate.return_value = GenerationResult(text="hi")
    return mock_generator


@pytest.fixture
def config(upload_dir):
    return RelayConfig(gemini_api_key="test-key", upload_dir=str(upload_dir), max_upload_mb=1)


@pytest.fixture
def app(config, generator):
    app = create_app(config, generator=generator)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def leftover_uploads(upload_dir):
    """
    Files still present in the upload directory.
    """
    def _list():
        if not upload_dir.exists():
            return []
        return list(upload_dir.iterdir())
    return _list
