from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import BinaryIO, Optional

from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_EDGE_PX = 1280


def open_image(stream: BinaryIO) -> Image.Image:
    try:
        img = Image.open(stream)
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError("Uploaded file is not a valid image") from e
    return img


class LocalPhotoStore:
    """Store uploaded photos on local disk and hand back a URL-ish reference.

    Uploads are decoded with Pillow (rejecting non-images), downscaled to
    MAX_EDGE_PX and re-encoded as JPEG.
    """

    def __init__(self, root_dir: str | Path, *, url_prefix: str = "/uploads"):
        self._root = Path(root_dir)
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def check_image(self, stream: BinaryIO) -> None:
        """Raise ValidationError unless `stream` decodes as an image. Nothing is written."""
        open_image(stream).close()

    def store(self, stream: BinaryIO, *, owner_id: int, kind: str = "selfie_photos") -> str:
        img = open_image(stream).convert("RGB")
        img.thumbnail((MAX_EDGE_PX, MAX_EDGE_PX))

        target_dir = self._root / kind
        target_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{int(owner_id)}_{uuid.uuid4().hex}.jpg"
        img.save(target_dir / filename, format="JPEG", quality=85)

        ref = f"{self._url_prefix}/{kind}/{filename}"
        logger.debug("Stored photo %s", ref)
        return ref

    def discard(self, ref: Optional[str]) -> bool:
        """Delete a file previously returned by `store`.

        References outside this store (or already gone) are left alone.
        """
        prefix = f"{self._url_prefix}/"
        if not ref or not ref.startswith(prefix):
            return False

        root = self._root.resolve()
        path = (root / ref[len(prefix):]).resolve()
        if root not in path.parents:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False

        logger.debug("Discarded photo %s", ref)
        return True
