"""
Upload validation for images and document copies.

Images are opened with Pillow so a renamed non-image is rejected even when
its extension and content type look right.
"""
import os
import logging
from django.conf import settings
from PIL import Image, UnidentifiedImageError
from rest_framework import serializers

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {'.jpeg', '.jpg', '.png', '.webp'}
IMAGE_FORMATS = {'JPEG', 'PNG', 'WEBP'}
DOCUMENT_EXTENSIONS = IMAGE_EXTENSIONS | {'.pdf'}


def _check_size(upload):
    max_bytes = getattr(settings, 'UPLOAD_MAX_BYTES', 5 * 1024 * 1024)
    if upload.size > max_bytes:
        raise serializers.ValidationError(
            f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
        )


def validate_image_upload(upload):
    """Accept jpeg/jpg/png/webp images within the upload size limit"""
    if upload is None:
        return upload
    _check_size(upload)

    extension = os.path.splitext(upload.name or '')[1].lower()
    if extension not in IMAGE_EXTENSIONS:
        raise serializers.ValidationError("Only image files are allowed (jpeg, jpg, png, webp).")

    try:
        image = Image.open(upload)
        image_format = image.format
        image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.warning(f"Rejected upload {upload.name}: {str(e)}")
        raise serializers.ValidationError("Uploaded file is not a valid image.")
    finally:
        upload.seek(0)

    if image_format not in IMAGE_FORMATS:
        raise serializers.ValidationError("Only image files are allowed (jpeg, jpg, png, webp).")
    return upload


def validate_document_upload(upload):
    """Invoice copies: PDF or an image"""
    if upload is None:
        return upload
    extension = os.path.splitext(upload.name or '')[1].lower()
    if extension == '.pdf':
        _check_size(upload)
        return upload
    if extension not in DOCUMENT_EXTENSIONS:
        raise serializers.ValidationError("Only PDF or image files are allowed.")
    return validate_image_upload(upload)
