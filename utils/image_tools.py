# utils/image_tools.py

from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError


def compress_image_bytes(
    data: bytes,
    max_width: int = 1920,
    quality: int = 80
) -> bytes:
    """
    Prepare an uploaded photo for storage:
    - Opens any format Pillow supports.
    - Applies EXIF orientation, so the stored pixels are upright and no EXIF is kept.
    - Converts to RGB to drop the alpha channel.
    - Downsizes to max_width keeping the aspect ratio, never enlarging.
    - Saves a progressive JPEG at the given quality.

    At 1920px and quality 80 a typical spotting shot lands under ~500KB.
    Raises ValueError if the bytes are not an image.
    """
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError):
        raise ValueError("Unsupported file: not an image")

    img = ImageOps.exif_transpose(img)

    if img.mode != "RGB":
        img = img.convert("RGB")

    if img.width > max_width:
        height = round(img.height * max_width / img.width)
        img = img.resize((max_width, max(height, 1)), Image.Resampling.LANCZOS)

    buf = BytesIO()
    img.save(
        buf,
        "JPEG",
        quality=quality,
        optimize=True,
        progressive=True
    )
    return buf.getvalue()
