"""
Generation routes: relay prompts and uploaded files to Gemini.

Provides routes for:
- Text prompts (/generate)
- Image + optional prompt (/generate-image)
- Documents (/generate-from-document)
- Audio (/generate-from-audio)

The blueprint is built by create_generation_blueprint() so the model client
and upload directory are injected once at startup instead of read from
module globals.
"""

import logging
from typing import Optional, Tuple

from flask import Blueprint, Response, jsonify, request

from genrelay.generation_service.gemini_client import GeminiGenerator, InlineData
from genrelay.generation_service.uploads import scoped_upload

DEFAULT_IMAGE_PROMPT = "Generate an image based on the provided input."
DOCUMENT_INSTRUCTION = "Analyze this document"
IMAGE_MIMETYPE = "image/png"
NOT_CONFIGURED = "AI service is not configured."


def _failure(message: str, status: int, with_success: bool = True) -> Tuple[Response, int]:
    if with_success:
        return jsonify({"success": False, "error": message}), status
    return jsonify({"error": message}), status


def _error_message(error: Exception, fallback: str) -> str:
    return str(error) or fallback


def create_generation_blueprint(
    generator: Optional[GeminiGenerator],
    upload_dir: str,
) -> Blueprint:
    """
    Build the generation blueprint around one generator.

    Args:
        generator: Model client shared by all handlers. None means the API key
            was missing; every route then answers 500.
        upload_dir: Where scoped uploads are written.

    Returns:
        Blueprint: Ready to register on the app.
    """
    generate_bp = Blueprint("generate", __name__)

    # --- REQUEST LOGGING ---
    @generate_bp.before_request
    def before_request() -> None:
        logging.info(f"[Generate] Incoming {request.method} {request.path}")

    @generate_bp.after_request
    def after_request(response: Response) -> Response:
        logging.info(f"[Generate] Response {response.status}")
        return response

    # --- TEXT ---
    @generate_bp.route("/generate", methods=["POST"])
    def generate_text() -> Tuple[Response, int]:
        """
        Generate text from a prompt.

        Expects a JSON body with:
        - prompt (str): Required, non-empty.

        Returns:
            200: {success: true, output}
            400: Missing prompt.
            500: Model error.
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        prompt = data.get("prompt")
        if not isinstance(prompt, str) or not prompt.strip():
            return jsonify({"error": "Prompt is required"}), 400

        if generator is None:
            return _failure(NOT_CONFIGURED, 500)

        try:
            result = generator.generate([prompt])
        except Exception as e:
            logging.exception("Error generating content")
            return _failure(_error_message(e, "Failed to generate content"), 500)

        return jsonify({"success": True, "output": result.text}), 200

    # --- IMAGE ---
    @generate_bp.route("/generate-image", methods=["POST"])
    def generate_image() -> Tuple[Response, int]:
        """
        Describe or transform an uploaded image.

        Expects multipart form data with:
        - image (file): Required. Sent to the model as image/png.
        - prompt (str): Optional instruction, defaults to DEFAULT_IMAGE_PROMPT.

        Returns:
            200: {success: true, output, image} where image is base64 or null.
            400: Missing image file.
            500: Model or file error.
        """
        storage = request.files.get("image")
        if not storage:
            return _failure("Image file is required", 400)

        if generator is None:
            return _failure(NOT_CONFIGURED, 500)

        prompt = request.form.get("prompt") or DEFAULT_IMAGE_PROMPT
        try:
            with scoped_upload(storage, upload_dir) as upload:
                image = InlineData(upload.read(), IMAGE_MIMETYPE)
                result = generator.generate([prompt, image])
        except Exception as e:
            logging.exception("Error generating from image")
            return _failure(_error_message(e, "Failed to generate image"), 500)

        return jsonify({"success": True, "output": result.text, "image": result.image}), 200

    # --- DOCUMENT ---
    @generate_bp.route("/generate-from-document", methods=["POST"])
    def generate_from_document() -> Tuple[Response, int]:
        """
        Analyze an uploaded document with its declared MIME type.

        Responses carry no `success` field; existing clients read `output`
        and `error` only.

        Returns:
            200: {output}
            400: Missing document file.
            500: {error}
        """
        storage = request.files.get("document")
        if not storage:
            return _failure("Document file is required", 400, with_success=False)

        if generator is None:
            return _failure(NOT_CONFIGURED, 500, with_success=False)

        try:
            with scoped_upload(storage, upload_dir) as upload:
                document = InlineData(upload.read(), upload.mimetype)
                result = generator.generate([DOCUMENT_INSTRUCTION, document])
        except Exception as e:
            logging.exception("Error analyzing document")
            return _failure(_error_message(e, "Failed to analyze document"), 500, with_success=False)

        return jsonify({"output": result.text}), 200

    # --- AUDIO ---
    @generate_bp.route("/generate-from-audio", methods=["POST"])
    def generate_from_audio() -> Tuple[Response, int]:
        """
        Forward an uploaded audio file as-is, with no extra instruction.

        Returns:
            200: {success: true, output}
            400: Missing audio file.
            500: {success: false, error}
        """
        storage = request.files.get("audio")
        if not storage:
            return jsonify({"error": "Audio file is required"}), 400

        if generator is None:
            return _failure(NOT_CONFIGURED, 500)

        try:
            with scoped_upload(storage, upload_dir) as upload:
                audio = InlineData(upload.read(), upload.mimetype)
                result = generator.generate([audio])
        except Exception as e:
            logging.exception("Error processing audio")
            return _failure(_error_message(e, "Failed to process audio"), 500)

        return jsonify({"success": True, "output": result.text}), 200

    return generate_bp
