from pathlib import Path

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from coastgrow.globals.logutil import info, setting_config, success, warn


class ImageLoadError(IOError):
    """Raised when a source image cannot be opened or decoded."""


class ImageWriteError(IOError):
    """Raised when an image cannot be encoded or written."""


def load_image(path: Path | str) -> np.ndarray:
    """Decode an image file into an RGBA pixel grid.

    Any mode Pillow understands (L, RGB, P, LA, ...) is converted to RGBA,
    so transparency in paletted PNGs is preserved.

    Returns
    -------
    np.ndarray
        ``(height, width, 4)`` uint8 array indexed ``[y, x]``.

    Raises
    ------
    ImageLoadError
        If the file is missing or cannot be decoded.
    """
    p = Path(path)
    info(f"Loading image: {p}")
    try:
        with Image.open(p) as img:
            rgba = np.array(img.convert("RGBA"), dtype=np.uint8)
    except FileNotFoundError as exc:
        raise ImageLoadError(f"Image not found: {p}") from exc
    except UnidentifiedImageError as exc:
        raise ImageLoadError(f"Could not decode image: {p}") from exc
    except Image.DecompressionBombError as exc:
        raise ImageLoadError(f"Image too large to load safely: {p}: {exc}") from exc
    except OSError as exc:
        raise ImageLoadError(f"Failed to read image {p}: {exc}") from exc

    h, w = rgba.shape[:2]
    setting_config(f"Loaded image size: {w}x{h}")
    return rgba

def to_u8_for_display(arr: np.ndarray) -> np.ndarray:
    """Normalize arrays to 0-255 uint8 for cv2.imwrite / cv2.imshow.
    - bool -> 0/255
    - uint8 left as-is; other integer types clipped to 0..255
    """
    if arr is None:
        return None
    if arr.dtype == np.bool_:
        return (arr.astype(np.uint8) * 255)
    if arr.dtype != np.uint8:
        return np.clip(arr, 0, 255).astype(np.uint8)
    return arr

def _to_opencv_channels(img_u8: np.ndarray) -> np.ndarray:
    """Pixel grids are RGB(A); OpenCV encodes BGR(A)."""
    if img_u8.ndim == 3 and img_u8.shape[2] == 4:
        return cv2.cvtColor(img_u8, cv2.COLOR_RGBA2BGRA)
    if img_u8.ndim == 3 and img_u8.shape[2] == 3:
        return cv2.cvtColor(img_u8, cv2.COLOR_RGB2BGR)
    return img_u8

def write_image(
    path: Path | str,
    image: np.ndarray,
    *,
    make_parents: bool = True,
    log: bool = True,
    message: str | None = None,
    overwrite: bool = True,
) -> Path:
    """Write a pixel grid to disk with directory creation and optional logging.

    Parameters
    ----------
    path : Path | str
        Destination path; the extension selects the encoder.
    image : np.ndarray
        RGBA/RGB grid, grayscale grid, or boolean mask.
    make_parents : bool, optional
        Create parent directories if missing, by default True.
    log : bool, optional
        Emit a success log after write, by default True.
    message : str | None, optional
        Custom message prefix for the log.
    overwrite : bool, optional
        If False, refuse to replace an existing file.

    Returns
    -------
    Path
        The path written to.

    Raises
    ------
    ImageWriteError
        If the image is None, the target exists without ``overwrite``, or
        OpenCV fails to encode/write it.
    """
    p = Path(path)
    img_u8 = to_u8_for_display(image)
    if img_u8 is None:
        raise ImageWriteError(f"write_image received None for: {p}")

    if p.exists():
        if not overwrite:
            raise ImageWriteError(f"Refusing to overwrite existing image: {p}")
        warn(f"Overwriting existing image: {p.resolve()}")

    try:
        if make_parents:
            p.parent.mkdir(parents=True, exist_ok=True)
        ok = cv2.imwrite(str(p), _to_opencv_channels(img_u8))
    except (cv2.error, OSError) as exc:
        raise ImageWriteError(f"Failed to write image {p}: {exc}") from exc

    if not ok or not p.exists():
        raise ImageWriteError(f"Failed to write image: {p}")
    if log:
        success(f"{message or 'Wrote image'}: {p.resolve()}")
    return p
