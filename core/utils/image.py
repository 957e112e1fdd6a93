import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from core.sa.models import new_id

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024
ALLOWED_TYPES = ('image/jpeg', 'image/png', 'image/webp', 'image/gif')
DEFAULT_MAX_WIDTH = 1200
DEFAULT_QUALITY = 75


class ImageValidationError(ValueError):
    pass


@dataclass
class StoredImage:
    id: str
    url: str
    storage_path: str
    size_bytes: int
    width: int
    height: int


def validate_image(content: Optional[bytes], content_type: Optional[str]) -> None:
    """Reject missing, oversized or unsupported uploads before decoding them"""
    if not content:
        raise ImageValidationError('No file provided')

    if (content_type or '').split(';')[0].strip().lower() not in ALLOWED_TYPES:
        raise ImageValidationError('Invalid file type. Please use JPG, PNG, WebP, or GIF.')

    if len(content) > MAX_FILE_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise ImageValidationError(f'File too large ({size_mb:.1f}MB). Maximum size is 5MB.')


def process_image(content: bytes, max_width: int = DEFAULT_MAX_WIDTH,
                  quality: int = DEFAULT_QUALITY) -> Tuple[bytes, int, int]:
    """Convert an image to JPEG, scaling it down to at most `max_width` pixels wide.

    Args:
        content: Raw image bytes
        max_width: Maximum width in pixels (default: 1200)
        quality: JPEG quality (default: 75)

    Returns:
        Tuple of (jpeg bytes, width, height)
    """
    try:
        img = Image.open(BytesIO(content))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageValidationError('Failed to load image') from e

    # Convert to RGB if necessary (e.g., if PNG with transparency)
    if img.mode not in ('RGB', 'L'):
        img = img.convert('RGB')

    if img.width > max_width:
        new_height = round(img.height * max_width / img.width)
        img = img.resize((max_width, new_height), Image.Resampling.LANCZOS)

    output = BytesIO()
    img.save(output, format='JPEG', quality=quality, optimize=True)
    return output.getvalue(), img.width, img.height


class ImageStore:
    def __init__(self, base_dir: str = 'data/media', base_url: str = '/media'):
        """Store book images on local disk.

        Files live under `<base_dir>/users/<user_id>/books/<book_id>/` and are
        served from the same relative path under `base_url`.
        """
        self.base_dir = Path(base_dir)
        self.base_url = base_url.rstrip('/')

    def _create_directory(self, relative: Path) -> Path:
        directory = self.base_dir / relative
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def save(self, user_id: str, book_id: str, content: bytes, content_type: str) -> StoredImage:
        validate_image(content, content_type)
        processed, width, height = process_image(content)

        image_id = new_id()
        relative_dir = Path('users') / user_id / 'books' / book_id
        file_path = self._create_directory(relative_dir) / f'{image_id}.jpg'
        with open(file_path, 'wb') as f:
            f.write(processed)

        storage_path = (relative_dir / file_path.name).as_posix()
        logger.info(f"Stored image {storage_path} ({len(processed)} bytes)")
        return StoredImage(
            id=image_id,
            url=f'{self.base_url}/{storage_path}',
            storage_path=storage_path,
            size_bytes=len(processed),
            width=width,
            height=height,
        )

    def _user_dir(self, user_id: str) -> Path:
        return (self.base_dir / 'users' / user_id).resolve()

    def _owned_path(self, user_id: str, storage_path: str) -> Path:
        """Resolve a storage path, refusing anything outside the user's own directory"""
        path = (self.base_dir / storage_path).resolve()
        if self.base_dir.resolve() not in path.parents:
            raise ValueError(f'Storage path outside media directory: {storage_path}')
        if self._user_dir(user_id) not in path.parents:
            raise ValueError(f'Storage path does not belong to user {user_id}: {storage_path}')
        return path

    def delete(self, user_id: str, storage_path: str) -> bool:
        """Remove one of the user's stored files. Returns False if it was already gone."""
        path = self._owned_path(user_id, storage_path)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"Image already removed: {storage_path}")
            return False
        return True

    def list_files(self, user_id: str) -> List[Tuple[str, int]]:
        """Every file stored for a user as (storage path, size in bytes) pairs"""
        user_dir = self._user_dir(user_id)
        if not user_dir.is_dir():
            return []
        root = self.base_dir.resolve()
        return [
            (path.relative_to(root).as_posix(), path.stat().st_size)
            for path in sorted(user_dir.rglob('*'))
            if path.is_file()
        ]
