"""
Blob Storage Service

Image uploads go to the cloud blob store over its HTTP API. Without a
read/write token configured, uploads return a placeholder URL and listings
are empty so local development keeps working.
"""

import logging
import time

import requests
from flask import current_app
from werkzeug.utils import secure_filename

from blog.errors import ValidationError, StorageError

logger = logging.getLogger(__name__)

API_VERSION = '7'


def _token():
    return current_app.config.get('BLOB_READ_WRITE_TOKEN')


def _headers(token, **extra):
    headers = {'authorization': f'Bearer {token}', 'x-api-version': API_VERSION}
    headers.update(extra)
    return headers


def is_configured():
    return bool(_token())


def build_pathname(filename, folder='uploads'):
    """'<folder>/<millis>-<safe filename>'"""
    safe = secure_filename(filename or '') or 'upload'
    folder = secure_filename(folder or '') or 'uploads'
    return f'{folder}/{int(time.time() * 1000)}-{safe}'


def validate_upload(file_storage):
    if file_storage is None or not file_storage.filename:
        raise ValidationError('No file provided')
    
    allowed = current_app.config['UPLOAD_ALLOWED_TYPES']
    mimetype = (file_storage.mimetype or '').lower()
    if mimetype not in allowed:
        raise ValidationError(f'Unsupported file type: {mimetype or "unknown"}')
    
    data = file_storage.read()
    if not data:
        raise ValidationError('Uploaded file is empty')
    if len(data) > current_app.config['UPLOAD_MAX_BYTES']:
        raise ValidationError('File is too large')
    return data, mimetype


def upload_image(file_storage, filename=None, folder='uploads'):
    """Upload an image and return {'url': ..., 'pathname': ..., 'type': ...}."""
    data, mimetype = validate_upload(file_storage)
    pathname = build_pathname(filename or file_storage.filename, folder)
    
    token = _token()
    if not token:
        logger.warning('BLOB_READ_WRITE_TOKEN is not set - returning placeholder URL')
        return {'url': current_app.config['BLOB_PLACEHOLDER_URL'], 'pathname': pathname, 'type': mimetype}
    
    url = f"{current_app.config['BLOB_API_URL'].rstrip('/')}/{pathname}"
    headers = _headers(token, **{'x-content-type': mimetype, 'x-add-random-suffix': '0'})
    logger.debug('Uploading %d bytes to blob store as %s', len(data), pathname)
    
    try:
        resp = requests.put(url, data=data, headers=headers, timeout=current_app.config['BLOB_TIMEOUT'])
    except requests.exceptions.Timeout:
        logger.error('Blob upload timed out for %s', pathname)
        raise StorageError('Blob storage request timed out')
    except requests.exceptions.RequestException as e:
        logger.exception('Blob upload failed for %s', pathname)
        raise StorageError(f'Blob storage request failed: {e}')
    
    if resp.status_code in (401, 403):
        logger.error('Blob store denied access (status %s); the token may be invalid or expired', resp.status_code)
        raise StorageError('Blob storage access denied')
    if resp.status_code != 200:
        logger.error('Blob store returned status %s for %s', resp.status_code, pathname)
        raise StorageError(f'Blob storage error {resp.status_code}')
    
    body = resp.json()
    return {'url': body.get('url'), 'pathname': body.get('pathname', pathname), 'type': mimetype}


def list_images(folder='uploads', limit=100):
    """Blobs under `folder`; empty when unconfigured or on error."""
    token = _token()
    if not token:
        return []
    
    try:
        resp = requests.get(current_app.config['BLOB_API_URL'],
                            params={'prefix': folder, 'limit': limit},
                            headers=_headers(token),
                            timeout=current_app.config['BLOB_TIMEOUT'])
        if resp.status_code != 200:
            logger.warning('Blob listing returned status %s', resp.status_code)
            return []
        blobs = resp.json().get('blobs', [])
    except requests.exceptions.RequestException:
        logger.exception('Blob listing failed')
        return []
    
    return [{
        'url': b.get('url'),
        'pathname': b.get('pathname'),
        'size': b.get('size'),
        'uploadedAt': b.get('uploadedAt'),
    } for b in blobs]


def delete_image(url):
    token = _token()
    if not token:
        logger.warning('BLOB_READ_WRITE_TOKEN is not set - skipping delete')
        return False
    
    try:
        resp = requests.post(f"{current_app.config['BLOB_API_URL'].rstrip('/')}/delete",
                             json={'urls': [url]},
                             headers=_headers(token),
                             timeout=current_app.config['BLOB_TIMEOUT'])
    except requests.exceptions.RequestException:
        logger.exception('Blob delete failed for %s', url)
        return False
    return resp.status_code == 200
