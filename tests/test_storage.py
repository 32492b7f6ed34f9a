import os
import time
from pathlib import Path

from garage_sale.services import storage


def age(path: Path, seconds: int) -> None:
    past = time.time() - seconds
    os.utime(path, (past, past))


def test_new_upload_base_is_timestamp_and_random_suffix():
    base = storage.new_upload_base()
    timestamp, suffix = base.split("-")

    assert timestamp.isdigit() and len(timestamp) >= 13
    assert suffix.isdigit()
    assert storage.new_upload_base() != base


def test_path_for_url_stays_inside_upload_dir(upload_dir):
    path = storage.path_for_url("/uploads/../../etc/passwd")

    assert path == upload_dir / "passwd"


def test_listing_files_include_stale_siblings(upload_dir):
    files = storage.listing_files("/uploads/1745194426166-844855877.webp")

    assert [f.name for f in files] == [
        "1745194426166-844855877.webp",
        "1745194426166-844855877.jpg",
        "1745194426166-844855877.jpeg",
        "1745194426166-844855877.png",
        "1745194426166-844855877.gif",
        "1745194426166-844855877.orig.webp",
    ]


def test_discard_is_idempotent(upload_dir):
    target = upload_dir / "a.webp"
    target.write_bytes(b"x")

    assert storage.discard(target, None) == [target]
    assert storage.discard(target) == []
    assert not target.exists()


def test_sweep_removes_only_old_unreferenced_files(client, super_admin_headers, make_listing, upload_dir):
    listing = make_listing()
    referenced = upload_dir / Path(listing.image_url).name
    orphan = upload_dir / "1600000000000-000000001.jpg"
    orphan.write_bytes(b"left behind")
    fresh = upload_dir / "1600000000000-000000002.png"
    fresh.write_bytes(b"upload in progress")
    for path in (referenced, orphan):
        age(path, 3600)

    dry = client.post("/maintenance/sweep-uploads?dry_run=true", headers=super_admin_headers)
    assert dry.json() == {"removed": [orphan.name]}
    assert orphan.exists()

    response = client.post("/maintenance/sweep-uploads", headers=super_admin_headers)

    assert response.status_code == 200
    assert response.json() == {"removed": [orphan.name]}
    assert not orphan.exists()
    assert referenced.exists()
    assert fresh.exists()


def test_clean_uploads_script_runs_from_any_directory(tmp_path, upload_dir):
    import subprocess
    import sys

    script = Path(__file__).resolve().parents[1] / "scripts" / "clean_uploads.py"

    result = subprocess.run(
        [sys.executable, str(script), "--dry-run"],
        cwd=tmp_path,
        env=dict(os.environ),
        capture_output=True,
        text=True,
        timeout=120,
    )

    assert result.returncode == 0, result.stderr
    assert "Would remove 0 file(s)" in result.stdout
