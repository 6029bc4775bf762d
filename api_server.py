#!/usr/bin/env python3
"""
Sticker Keyer API Server
Chroma-key removal for generated stickers: one-shot removal plus a
per-sticker background toggle.
"""

import os
import logging
import uuid
from typing import Dict, Optional
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify
from flask_cors import CORS

from models.sticker import Sticker
from models.target_color import TargetColor
from models.exceptions import DecodeError
from services.image_service import ImageService
from services.chroma_key_service import ChromaKeyService
from services.sticker_service import StickerService

logger = logging.getLogger(__name__)

# Configuration
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "20")) * 1024 * 1024


def _bad_request(message: str, status: int = 400):
    return jsonify({'success': False, 'message': message}), status


def _parse_sensitivity(value) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(float(value))
    except (ValueError, TypeError, OverflowError):
        raise ValueError(f"Invalid sensitivity: {value!r}") from None


def _json_body():
    """JSON object body, {} when absent. Arrays and scalars are rejected."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValueError('Request body must be a JSON object')
    return body


def create_app(
    image_service: ImageService = None,
    chroma_key_service: ChromaKeyService = None,
    sticker_service: StickerService = None,
) -> Flask:
    app = Flask(__name__)
    CORS(app)  # Enable CORS for frontend communication
    app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

    image_service = image_service or ImageService()
    chroma_key_service = chroma_key_service or ChromaKeyService()
    sticker_service = sticker_service or StickerService(
        image_service=image_service, chroma_key_service=chroma_key_service
    )

    # In-process sticker storage
    stickers: Dict[str, Sticker] = {}
    app.config['STICKERS'] = stickers

    @app.route('/api/remove-background', methods=['POST'])
    def remove_background():
        """Key out the backing color of a single image and return a PNG data URL."""
        try:
            payload = _json_body() or request.form
            sensitivity = _parse_sensitivity(payload.get('sensitivity'))
            target = TargetColor.parse(payload.get('target_color') or sticker_service.default_color)
        except ValueError as e:
            return _bad_request(str(e))
        if sensitivity is None:
            sensitivity = sticker_service.sensitivity

        try:
            if 'image' in request.files:
                image = image_service.decode(request.files['image'].read())
            elif isinstance(payload.get('image'), str) and payload['image']:
                image = image_service.from_data_url(payload['image'])
            else:
                return _bad_request('No image provided')
        except DecodeError as e:
            logger.warning(f"Decode failed: {e}")
            return _bad_request(f'Could not decode image: {e}', 422)

        keyed, mask = chroma_key_service.remove_with_mask(image, sensitivity, target)
        removed = int(mask.sum())

        logger.info(f"Removed {removed}/{image.pixel_count} {target.value} pixels "
                    f"({image.width}x{image.height}, sensitivity={sensitivity})")

        return jsonify({
            'success': True,
            'image': image_service.to_data_url(keyed),
            'removed_pixels': removed,
            'width': keyed.width,
            'height': keyed.height,
        })

    @app.route('/api/stickers', methods=['POST'])
    def register_sticker():
        """Register a generated sticker (raw image still on its backing color)."""
        try:
            payload = _json_body()
        except ValueError as e:
            return _bad_request(str(e))
        raw_url = payload.get('raw_image_url')
        if not raw_url or not isinstance(raw_url, str):
            return _bad_request('No raw_image_url provided')
        try:
            mask_color = TargetColor.parse(payload.get('mask_color') or sticker_service.default_color)
        except ValueError as e:
            return _bad_request(str(e))

        sticker = Sticker(
            id=payload.get('id') or uuid.uuid4().hex,
            prompt_id=payload.get('prompt_id', ''),
            image_url=raw_url,
            raw_image_url=raw_url,
            original_prompt=payload.get('original_prompt', ''),
            mask_color=mask_color,
            base_prompt=payload.get('base_prompt'),
            meme_text=payload.get('meme_text'),
        )
        stickers[sticker.id] = sticker
        return jsonify({'success': True, 'sticker': sticker.to_dict()}), 201

    @app.route('/api/stickers/<sticker_id>/toggle', methods=['POST'])
    def toggle_sticker_background(sticker_id):
        """Remove the backing color, or restore the raw image."""
        sticker = stickers.get(sticker_id)
        if sticker is None:
            return _bad_request('Sticker not found', 404)

        try:
            payload = _json_body()
            sensitivity = _parse_sensitivity(payload.get('sensitivity'))
        except ValueError as e:
            return _bad_request(str(e))

        try:
            sticker_service.toggle_background(sticker, sensitivity)
        except DecodeError as e:
            return jsonify({
                'success': False,
                'message': f'Could not decode sticker image: {e}',
                'sticker': sticker.to_dict(),
            }), 422

        return jsonify({'success': True, 'sticker': sticker.to_dict()})

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'message': 'Sticker Keyer API is running',
            'stickers': len(stickers)
        })

    @app.errorhandler(413)
    def too_large(e):
        """Handle file too large error."""
        return jsonify({'error': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.'}), 413

    @app.errorhandler(500)
    def internal_error(e):
        """Handle internal server error."""
        logger.error(f"Internal server error: {e}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


def main():
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )
    host = os.getenv("STICKER_API_HOST", "127.0.0.1")
    port = int(os.getenv("STICKER_API_PORT", "5000"))

    logger.info(f"Starting Sticker Keyer API on {host}:{port}")
    logger.info(f"Max upload size: {MAX_CONTENT_LENGTH // (1024 * 1024)}MB")
    create_app().run(host=host, port=port)


if __name__ == '__main__':
    main()
