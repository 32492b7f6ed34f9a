"""Upload directory bookkeeping.

Every file the service writes lives flat in ``settings.UPLOAD_DIR`` under a
generated ``<ms-timestamp>-<random>`` base name. ``discard`` is the one place
files get removed: it never raises, so callers can use it on any failure
path once the database state is settled.
"""

import logging
import os
import secrets
import time
from pathlib import Path

from sqlalchemy.orm import Session

from garage_sale.core.config import settings
from garage_sale.models.images import Image

logger = logging.getLogger("app")

# Extensions earlier deployments left next to the processed file
LEGACY_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif")

# Raw .webp uploads need a name distinct from the processed output
RAW_WEBP_SUFFIX = ".orig.webp"


def upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def new_upload_base() -> str:
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"


def upload_path(name: str) -> Path:
    return upload_dir() / os.path.basename(name)


def url_for(name: str) -> str:
    return f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{os.path.basename(name)}"


def path_for_url(image_url: str) -> Path:
    # Only the basename is trusted; stored URLs never point outside UPLOAD_DIR
    return upload_path(os.path.basename(image_url))


def listing_files(image_url: str) -> list[Path]:
    """The processed file plus any stale originals sharing its base name."""
    main = path_for_url(image_url)
    base = main.name[: -len(main.suffix)] if main.suffix else main.name
    siblings = [
        main.with_name(base + ext)
        for ext in (*LEGACY_EXTENSIONS, RAW_WEBP_SUFFIX)
        if base + ext != main.name
    ]
    return [main, *siblings]


def discard(*paths) -> list[Path]:
    removed = []

    for path in paths:
        if path is None:
            continue

        path = Path(path)

        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug("File already gone, skipping: %s", path)
        except OSError as exc:
            logger.warning("Could not delete %s: %s", path, exc)
        else:
            logger.info("Deleted file %s", path)
            removed.append(path)

    return removed


def sweep_orphan_uploads(db: Session, dry_run: bool = False, min_age_seconds: int = 300) -> list[str]:
    """Delete files in the upload directory that no listing references.

    Files younger than ``min_age_seconds`` are left alone: they may belong to
    an upload that is still being processed.
    """
    cutoff = time.time() - min_age_seconds
    referenced = {
        os.path.basename(url)
        for (url,) in db.query(Image.image_url).all()
    }

    orphans = sorted(
        entry.name
        for entry in upload_dir().iterdir()
        if entry.is_file()
        and entry.name not in referenced
        and entry.stat().st_mtime <= cutoff
    )

    if dry_run:
        logger.info("Orphan sweep (dry run): %d file(s) would be removed", len(orphans))
        return orphans

    removed = discard(*(upload_path(name) for name in orphans))
    logger.info("Orphan sweep removed %d file(s)", len(removed))
    return [path.name for path in removed]
