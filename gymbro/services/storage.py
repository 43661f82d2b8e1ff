# storage.py

"""Image storage for post images and profile pictures.

Images are written either to the local upload folder, where ``/uploads/...``
serves them, or to Cloudinary when ``IMAGE_STORAGE`` is ``cloudinary``. The
value returned by :func:`save_image` is what gets stored on the document: a
public ``/uploads/<kind>/<name>`` path or a Cloudinary secure URL.
"""

import logging
import os
import random
import re
import time
from urllib.parse import urlparse

from cloudinary import api, uploader
from cloudinary.exceptions import Error as CloudinaryError
from flask import current_app
from werkzeug.security import safe_join
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {'image/jpeg', 'image/png', 'image/gif', 'image/webp'}

POSTS = 'posts'
PROFILE = 'profile'

FILE_PREFIXES = { POSTS: 'post', PROFILE: 'profile' }

DEFAULT_PROFILE_PICTURE = '/uploads/default.jpg'

CLOUDINARY_ROOT = 'gymbro'


class StorageError(Exception):
    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


# FUNCTION normalize_image_path
def normalize_image_path(image_path):
    if not image_path:
        return None

    if image_path.startswith(('http://', 'https://')):
        return image_path

    fixed_path = image_path.replace('\\', '/')

    if not fixed_path.startswith('/'):
        fixed_path = '/' + fixed_path

    # bare file names belong to post images
    if not fixed_path.startswith('/uploads/'):
        fixed_path = f'/uploads/{POSTS}/{fixed_path.rsplit("/", 1)[-1]}'

    return fixed_path


def _max_size(kind):
    if kind == PROFILE:
        return current_app.config['PROFILE_IMAGE_MAX_SIZE']
    return current_app.config['POST_IMAGE_MAX_SIZE']


def _file_size(file):
    file.seek(0, os.SEEK_END)
    size = file.tell()
    file.seek(0)
    return size


# FUNCTION validate_image
def validate_image(file, kind):
    if file.mimetype not in ALLOWED_MIME_TYPES:
        raise StorageError('Invalid file type. Only JPEG, PNG, GIF, and WebP images are allowed.')

    max_size = _max_size(kind)
    if _file_size(file) > max_size:
        raise StorageError(f'File too large. Maximum size is {max_size // (1024 * 1024)}MB', 413)


# FUNCTION save_image
def save_image(file, kind, owner_id):
    validate_image(file, kind)

    if current_app.config['IMAGE_STORAGE'] == 'cloudinary':
        return _save_cloudinary(file, kind, owner_id)

    return _save_local(file, kind)


def _save_local(file, kind):
    extension = os.path.splitext(secure_filename(file.filename or ''))[1].lower()
    filename = f'{FILE_PREFIXES[kind]}-{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}{extension}'

    directory = os.path.join(current_app.config['UPLOAD_FOLDER'], kind)
    os.makedirs(directory, exist_ok=True)
    file.save(os.path.join(directory, filename))

    logger.info('Saved %s image %s', kind, filename)
    return f'/uploads/{kind}/{filename}'


def _save_cloudinary(file, kind, owner_id):
    try:
        result = uploader.upload(file, folder=f'{CLOUDINARY_ROOT}/{kind}/{owner_id}', public_id=str(time.time()))
    except CloudinaryError as e:
        logger.exception('Cloudinary upload failed')
        raise StorageError('Image upload failed', 502) from e

    logger.info('Uploaded %s image %s', kind, result['public_id'])
    return result['secure_url']


# FUNCTION public_id_from_url
def public_id_from_url(url):
    path = urlparse(url).path
    _, _, tail = path.partition('/upload/')
    parts = [part for part in tail.split('/') if part]

    # skip the version segment
    if parts and re.fullmatch(r'v\d+', parts[0]):
        parts = parts[1:]

    return os.path.splitext('/'.join(parts))[0]


# FUNCTION delete_image
def delete_image(image_path):
    """Remove an image this app stored. Missing files and foreign paths are ignored."""
    if not image_path or image_path == DEFAULT_PROFILE_PICTURE:
        return False

    if image_path.startswith(('http://', 'https://')):
        if 'res.cloudinary.com' not in image_path:
            return False

        public_id = public_id_from_url(image_path)
        if not public_id.startswith(CLOUDINARY_ROOT + '/'):
            logger.warning('Refusing to delete Cloudinary asset %s', image_path)
            return False

        try:
            api.delete_resources([public_id])
        except CloudinaryError:
            logger.exception('Could not delete Cloudinary image %s', image_path)
            return False

        return True

    relative_path = normalize_image_path(image_path)[len('/uploads/'):]

    # only files under the posts/ and profile/ folders
    if relative_path.split('/', 1)[0] not in FILE_PREFIXES:
        return False

    full_path = safe_join(current_app.config['UPLOAD_FOLDER'], relative_path)

    if full_path is None or not os.path.isfile(full_path):
        logger.info('Image %s not found on disk', image_path)
        return False

    try:
        os.remove(full_path)
    except OSError:
        logger.exception('Could not delete image %s', image_path)
        return False

    logger.info('Deleted image %s', image_path)
    return True
