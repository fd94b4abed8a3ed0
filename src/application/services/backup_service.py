from __future__ import annotations

from pathlib import Path

from src.domain.entities import Bookmark
from src.logging_config import get_logger
from src.repositories.bookmarks import BookmarksRepo
from src.serialization import decode_batch, encode_batch


class BackupService:
    """Export and import the whole bookmark store as one encoded batch.

    Exports carry only the interchange fields; favorite flags, click counters
    and dates are not preserved across a restore.
    """

    def __init__(self, repo: BookmarksRepo) -> None:
        self._repo = repo
        self._logger = get_logger("backup")

    def export_text(self) -> str:
        """Encode all bookmarks in insertion order. Raises EmptyBatchError when empty."""
        return encode_batch([b.to_record() for b in self._repo.list_all()])

    def export_to_file(self, path: Path | str) -> Path:
        text = self.export_text()
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        self._logger.info("Exported bookmarks", extra={"path": str(target)})
        return target

    def import_text(self, text: str, *, skip_existing: bool = True) -> list[Bookmark]:
        """Decode a batch and create its bookmarks.

        The whole batch is decoded before anything is written, so a codec error
        leaves the store untouched. With ``skip_existing``, a record whose URL is
        already stored in the same list is skipped.
        """
        records = decode_batch(text)
        created: list[Bookmark] = []
        skipped = 0
        for record in records:
            if skip_existing and self._repo.find_by_url(record.url, record.list_name):
                skipped += 1
                continue
            created.append(self._repo.create_record(Bookmark.from_record(record)))
        self._logger.info(
            "Imported bookmarks", extra={"created": len(created), "skipped": skipped}
        )
        return created

    def import_from_file(self, path: Path | str, *, skip_existing: bool = True) -> list[Bookmark]:
        text = Path(path).read_text(encoding="utf-8")
        return self.import_text(text, skip_existing=skip_existing)
