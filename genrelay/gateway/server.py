"""
Gateway: builds the Flask app and wires the generation blueprint.
This is the local entrypoint for development.
"""

import logging
from typing import Optional, Tuple

from flask import Flask, Response, jsonify
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from genrelay.config import RelayConfig
from genrelay.generation_service.gemini_client import GeminiGenerator
from genrelay.generation_service.routes import create_generation_blueprint

# Basic console logging during API requests
logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")


def build_generator(config: RelayConfig) -> Optional[GeminiGenerator]:
    """
    Create the Gemini client, or None when no API key is configured.
    """
    if not config.gemini_api_key:
        logging.warning("GEMINI_API_KEY is missing. Generation routes will return 500.")
        return None
    return GeminiGenerator(
        api_key=config.gemini_api_key,
        model_name=config.model_name,
        timeout_ms=config.timeout_ms,
    )


def create_app(
    config: Optional[RelayConfig] = None,
    generator: Optional[GeminiGenerator] = None,
) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        config: Settings to use. Read from the environment when omitted.
        generator: Model client to inject. Built from `config` when omitted.

    Returns:
        Flask: The configured Flask application.
    """
    config = config or RelayConfig.from_env()
    if generator is None:
        generator = build_generator(config)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_content_length

    CORS(app, resources={
        r"/*": {
            "origins": list(config.cors_origins),
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type"],
        }
    })

    # --- REGISTER BLUEPRINTS ---
    app.register_blueprint(create_generation_blueprint(generator, config.upload_dir))
    logging.info("Generation blueprint registered.")

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping() -> Tuple[Response, int]:
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"status": "gateway_ok"}), 200

    @app.route("/health")
    def health() -> Tuple[Response, int]:
        return jsonify({"status": "ok"}), 200

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(error: RequestEntityTooLarge) -> Tuple[Response, int]:
        return jsonify({"error": f"File too large; max {config.max_upload_mb} MB."}), 413

    return app


def main() -> None:
    config = RelayConfig.from_env()
    app = create_app(config)
    logging.info(f"Server is running on port {config.port}")
    app.run(host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
