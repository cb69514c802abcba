"""Namespace manager: owner of the (folder, alias) identity space

Every mutation of shortcuts and folders goes through NamespaceManager. It validates
all identity fields, keeps an explicit composite-key -> id index (rebuilt from the
record store on startup), and serializes mutations with a re-entrant lock so the
check-then-act uniqueness verification stays safe when the manager is shared between
threads of one process.

Invariants upheld:
    - No two live shortcuts share a case-insensitively equal full alias.
    - Folder deletion fails while any shortcut references the folder.
    - Tags are always stored normalized (validated, deduplicated, sorted).
    - A failed mutation leaves no trace in the record store or in the index.

Classes:
    NamespaceManager:
        Create/update/delete shortcuts and manage folders.
    BulkResult:
        Outcome of a bulk operation.

Example:
    >>> from aliasnav.dao.memory import ShortcutMemoryDAO, FolderMemoryDAO
    >>> namespace = NamespaceManager(ShortcutMemoryDAO(), FolderMemoryDAO())
    >>> namespace.create({'url': 'https://work.com/meet', 'alias': 'meet', 'folder': 'work'}).full_alias
    'work/meet'
    >>> namespace.create({'url': 'https://x.com', 'alias': 'Meet', 'folder': 'Work'})
    Traceback (most recent call last):
        ...
    aliasnav.exceptions.DuplicateAliasError: Alias already exists: work/meet
"""

import logging
import threading
from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

from aliasnav.types import ShortcutDraft, ShortcutPatch
from aliasnav.models import ShortcutModel, FolderModel, FolderStats
from aliasnav.dao.base import ShortcutBaseDAO, FolderBaseDAO
from aliasnav.dao.exceptions import ShortcutNotFoundError, FolderNotFoundError
from aliasnav.exceptions import (
    AliasNavError,
    DuplicateAliasError,
    FolderExistsError,
    FolderNotEmptyError,
    FolderRenameConflictError,
    InvalidFolderError,
)
from aliasnav.utils.helpers import utc_now
from aliasnav.utils.identifiers import generate_id
from aliasnav.utils.constants import DEFAULT_ID_SALT, DEFAULT_ID_LENGTH, ROOT_FOLDER_LABEL
from aliasnav.utils.validators import (
    fold,
    composite_key,
    validate_url,
    validate_alias,
    validate_folder,
    validate_tags,
)


logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = frozenset({'url', 'alias', 'folder', 'tags'})
BULK_OPERATIONS = frozenset({'delete', 'add_tags', 'remove_tag', 'move_to_folder'})


@dataclass
class BulkResult:
    updated: int = 0
    failed: int = 0
    errors: list[dict[str, str]] = field(default_factory=list)


class NamespaceManager:
    """Enforce global uniqueness of full aliases across all mutations

    Attributes:
        shortcuts (ShortcutBaseDAO):
            Shortcut record store.
        folders (FolderBaseDAO):
            Folder record store.

    Methods:
        create(draft) -> ShortcutModel
        update(shortcut_id, patch) -> ShortcutModel
        delete(shortcut_id) -> None
        create_folder(name) -> FolderModel
        rename_folder(old_name, new_name) -> int
        delete_folder(name) -> None
        cleanup_empty_folders() -> int
        list_folders() -> list[FolderStats]
        bulk(ids, operation, data) -> BulkResult
        statistics() -> dict
    """

    def __init__(
        self,
        shortcuts: ShortcutBaseDAO,
        folders: FolderBaseDAO,
        clock: Optional[Callable[[], datetime]] = None,
        id_salt: str = DEFAULT_ID_SALT,
        id_length: int = DEFAULT_ID_LENGTH,
    ):
        self.shortcuts = shortcuts
        self.folders = folders
        self._clock = clock or utc_now
        self._id_salt = id_salt
        self._id_length = id_length
        self._lock = threading.RLock()
        self._index: dict[str, str] = {}

        self.rebuild_index()

    # -------------------------------
    # Index
    # -------------------------------

    def rebuild_index(self) -> None:
        """Rebuild the composite-key -> id index from the record store"""
        with self._lock:
            index = {}
            for shortcut in self.shortcuts.all():
                if shortcut.composite_key in index:
                    logger.warning(
                        'Duplicate full alias found in record store.',
                        extra={'fullAlias': shortcut.full_alias, 'shortcutId': shortcut.id, 'conflictsWith': index[shortcut.composite_key]},
                    )
                    continue
                index[shortcut.composite_key] = shortcut.id
            self._index = index

        logger.debug('Rebuilt namespace index.', extra={'count': len(index)})

    def _owner(self, key: str) -> Optional[str]:
        """Return the id currently holding a composite key

        Stale index entries (record removed behind our back) are dropped.
        """
        shortcut_id = self._index.get(key)
        if shortcut_id is None:
            return None
        shortcut = self.shortcuts.get(shortcut_id)
        if shortcut is None or shortcut.composite_key != key:
            self._index.pop(key, None)
            return None
        return shortcut_id

    def _ensure_available(self, folder: str, alias: str, exclude_id: Optional[str] = None) -> None:
        owner = self._owner(composite_key(folder, alias))
        if owner is not None and owner != exclude_id:
            raise DuplicateAliasError(self.shortcuts.get(owner).full_alias)

    # -------------------------------
    # Shortcuts
    # -------------------------------

    def get(self, shortcut_id: str) -> Optional[ShortcutModel]:
        return self.shortcuts.get(shortcut_id)

    def require(self, shortcut_id: str) -> ShortcutModel:
        shortcut = self.shortcuts.get(shortcut_id)
        if shortcut is None:
            raise ShortcutNotFoundError(f"Shortcut with id '{shortcut_id}' not found.")
        return shortcut

    def all(self) -> list[ShortcutModel]:
        return self.shortcuts.all()

    def get_by_full_alias(self, text: str) -> Optional[ShortcutModel]:
        """Resolve 'folder/alias' (or 'alias' for root) case-insensitively

        Example:
            >>> namespace.get_by_full_alias('WORK/Meet').url
            'https://work.com/meet'
        """
        with self._lock:
            shortcut_id = self._owner(fold(text))
        return self.shortcuts.get(shortcut_id) if shortcut_id is not None else None

    def by_folder(self, name: str) -> list[ShortcutModel]:
        key = fold(name)
        return sorted((s for s in self.shortcuts.all() if fold(s.folder) == key), key=lambda s: fold(s.alias))

    def by_tag(self, tag: str) -> list[ShortcutModel]:
        key = fold(tag)
        return sorted((s for s in self.shortcuts.all() if key in (fold(t) for t in s.tags)), key=lambda s: s.composite_key)

    def _validated_fields(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            'url': validate_url(data.get('url')).unwrap(),
            'alias': validate_alias(data.get('alias')).unwrap(),
            'folder': validate_folder(data.get('folder')).unwrap(),
            'tags': validate_tags(data.get('tags')).unwrap(),
        }

    def create(self, draft: ShortcutDraft) -> ShortcutModel:
        """Create a new shortcut

        Args:
            draft (ShortcutDraft):
                Mapping with 'url', 'alias', optional 'folder' and optional 'tags'
                (list or comma-separated string).

        Returns:
            ShortcutModel: The persisted shortcut.

        Raises:
            InvalidUrlError / InvalidAliasError / InvalidFolderError / InvalidTagError:
                If a field fails validation.
            DuplicateAliasError:
                If the full alias is already taken (case-insensitive).
            StoreUnavailableError:
                If the record store cannot be reached.
        """
        with self._lock:
            try:
                fields = self._validated_fields(draft)
                self._ensure_available(fields['folder'], fields['alias'])
            except AliasNavError as e:
                logger.debug('Shortcut creation rejected.', extra={'errorCode': e.error_code, 'reason': str(e)})
                raise

            now = self._clock()
            shortcut = ShortcutModel(
                id=self._next_id(),
                created_at=now,
                updated_at=now,
                **fields,
            )
            self.shortcuts.put(shortcut)
            try:
                self._ensure_folder(shortcut.folder, now)
            except Exception:
                self.shortcuts.delete(shortcut.id)
                raise
            self._index[shortcut.composite_key] = shortcut.id

        logger.info('Shortcut created.', extra={'shortcutId': shortcut.id, 'fullAlias': shortcut.full_alias})
        return shortcut

    def update(self, shortcut_id: str, patch: ShortcutPatch) -> ShortcutModel:
        """Apply a partial update to a shortcut

        The merged result is fully re-validated. The uniqueness check only runs when the
        alias or folder changes, excluding the shortcut itself.

        Args:
            shortcut_id (str):
                Id of the shortcut to update.
            patch (ShortcutPatch):
                Mapping with any of 'url', 'alias', 'folder', 'tags'.

        Returns:
            ShortcutModel: The persisted shortcut with a refreshed updated_at.

        Raises:
            TypeError:
                If the patch contains fields that are not editable.
            ShortcutNotFoundError:
                If the shortcut does not exist.
            InvalidUrlError / InvalidAliasError / InvalidFolderError / InvalidTagError:
                If the merged result fails validation.
            DuplicateAliasError:
                If the new full alias is already taken.
        """
        unknown = set(patch) - PATCHABLE_FIELDS
        if unknown:
            raise TypeError(f"Cannot patch field(s): {', '.join(sorted(unknown))}")

        with self._lock:
            current = self.require(shortcut_id)
            merged = {
                'url': current.url,
                'alias': current.alias,
                'folder': current.folder,
                'tags': list(current.tags),
                **patch,
            }

            try:
                fields = self._validated_fields(merged)
                if composite_key(fields['folder'], fields['alias']) != current.composite_key:
                    self._ensure_available(fields['folder'], fields['alias'], exclude_id=shortcut_id)
            except AliasNavError as e:
                logger.debug('Shortcut update rejected.', extra={'shortcutId': shortcut_id, 'errorCode': e.error_code, 'reason': str(e)})
                raise

            now = self._clock()
            updated = replace(current, updated_at=now, **fields)
            self.shortcuts.put(updated)
            try:
                self._ensure_folder(updated.folder, now)
            except Exception:
                self.shortcuts.put(current)
                raise
            if updated.composite_key != current.composite_key:
                self._index.pop(current.composite_key, None)
            self._index[updated.composite_key] = updated.id

        logger.info('Shortcut updated.', extra={'shortcutId': shortcut_id, 'fullAlias': updated.full_alias})
        return updated

    def delete(self, shortcut_id: str) -> None:
        """Delete a shortcut (folders are never cascaded, see cleanup_empty_folders())

        Raises:
            ShortcutNotFoundError:
                If the shortcut does not exist.
        """
        with self._lock:
            current = self.require(shortcut_id)
            self.shortcuts.delete(shortcut_id)
            if self._index.get(current.composite_key) == shortcut_id:
                del self._index[current.composite_key]

        logger.info('Shortcut deleted.', extra={'shortcutId': shortcut_id, 'fullAlias': current.full_alias})

    def _next_id(self) -> str:
        while True:
            shortcut_id = generate_id(self.shortcuts.count(increment=True), salt=self._id_salt, length=self._id_length)
            if self.shortcuts.get(shortcut_id) is None:
                return shortcut_id

    # -------------------------------
    # Folders
    # -------------------------------

    def _ensure_folder(self, name: str, created_at: datetime) -> Optional[FolderModel]:
        """Create the folder record on first use (implicit folder creation)

        Returns:
            Optional[FolderModel]: the new record, or None if one already existed.
        """
        if not name or self.folders.get(name) is not None:
            return None
        folder = FolderModel(name=name, created_at=created_at)
        self.folders.put(folder)
        logger.info('Folder created.', extra={'folder': name, 'implicit': True})
        return folder

    def _reference_counts(self) -> Counter:
        return Counter(fold(s.folder) for s in self.shortcuts.all() if s.folder)

    def folder_exists(self, name: str) -> bool:
        key = fold(name)
        if not key:
            return False
        return self.folders.get(key) is not None or self._reference_counts()[key] > 0

    def create_folder(self, name: str) -> FolderModel:
        """Explicitly create a folder

        Raises:
            InvalidFolderError:
                If the name is empty or invalid.
            FolderExistsError:
                If a folder with the same (case-insensitive) name exists.
        """
        name = validate_folder(name).unwrap()
        if not name:
            raise InvalidFolderError('Folder name is required')

        with self._lock:
            if self.folder_exists(name):
                raise FolderExistsError(name)
            folder = FolderModel(name=name, created_at=self._clock())
            self.folders.put(folder)

        logger.info('Folder created.', extra={'folder': name, 'implicit': False})
        return folder

    def rename_folder(self, old_name: str, new_name: str) -> int:
        """Move every shortcut of a folder into another folder, atomically

        Case-insensitively equal names are a no-op. Every shortcut is checked against
        the target folder before anything is written; on any collision the rename
        fails and nothing changes. All moved shortcuts are written in one atomic
        store call.

        Args:
            old_name (str):
                Existing folder name.
            new_name (str):
                Target folder name (may already exist; folders are merged).

        Returns:
            int: Number of shortcuts moved (0 for the no-op).

        Raises:
            InvalidFolderError:
                If either name is empty or the new name is invalid.
            FolderNotFoundError:
                If the old folder neither exists as a record nor is referenced.
            FolderRenameConflictError:
                If any moved alias collides with an alias in the target folder.
        """
        if fold(old_name) == fold(new_name):
            return 0

        old_name = (old_name or '').strip()
        new_name = validate_folder(new_name).unwrap()
        if not old_name or not new_name:
            raise InvalidFolderError('Folder name is required')

        with self._lock:
            old_key = fold(old_name)
            members = [s for s in self.shortcuts.all() if fold(s.folder) == old_key]
            old_record = self.folders.get(old_key)
            if not members and old_record is None:
                raise FolderNotFoundError(f"Folder '{old_name}' not found.")

            conflicts = []
            for shortcut in members:
                owner = self._owner(composite_key(new_name, shortcut.alias))
                if owner is not None and owner != shortcut.id:
                    conflicts.append(f'{new_name}/{shortcut.alias}')
            if conflicts:
                logger.debug('Folder rename rejected.', extra={'folder': old_name, 'newFolder': new_name, 'conflicts': conflicts})
                raise FolderRenameConflictError(old_name, new_name, conflicts)

            now = self._clock()
            moved = [replace(shortcut, folder=new_name, updated_at=now) for shortcut in members]
            created = self._ensure_folder(new_name, old_record.created_at if old_record is not None else now)

            try:
                self.shortcuts.put_many(moved)
            except Exception:
                if created is not None:
                    self.folders.delete(created.key)
                raise

            if old_record is not None:
                try:
                    self.folders.delete(old_key)
                except Exception:
                    self.shortcuts.put_many(members)
                    if created is not None:
                        self.folders.delete(created.key)
                    raise

            for before, after in zip(members, moved):
                self._index.pop(before.composite_key, None)
                self._index[after.composite_key] = after.id

        logger.info('Folder renamed.', extra={'folder': old_name, 'newFolder': new_name, 'count': len(moved)})
        return len(moved)

    def delete_folder(self, name: str) -> None:
        """Delete an empty folder

        Raises:
            FolderNotEmptyError:
                If any shortcut still references the folder.
            FolderNotFoundError:
                If no folder record exists.
        """
        with self._lock:
            key = fold(name)
            count = self._reference_counts()[key]
            if count:
                raise FolderNotEmptyError(name.strip(), count)
            if not self.folders.delete(key):
                raise FolderNotFoundError(f"Folder '{name.strip()}' not found.")

        logger.info('Folder deleted.', extra={'folder': name.strip()})

    def cleanup_empty_folders(self) -> int:
        """Delete every folder record with zero referencing shortcuts

        Idempotent: a second call removes nothing.

        Returns:
            int: Number of folder records removed.
        """
        with self._lock:
            counts = self._reference_counts()
            removed = 0
            for folder in self.folders.all():
                if counts[folder.key] == 0 and self.folders.delete(folder.key):
                    removed += 1

        logger.info('Cleaned up empty folders.', extra={'count': removed})
        return removed

    def list_folders(self) -> list[FolderStats]:
        """Return explicit and implicit folders with their derived shortcut counts"""
        counts = self._reference_counts()
        display = {}
        for shortcut in self.shortcuts.all():
            if shortcut.folder:
                display.setdefault(fold(shortcut.folder), shortcut.folder)

        stats = {folder.key: FolderStats(folder.name, folder.created_at, counts[folder.key]) for folder in self.folders.all()}
        for key, name in display.items():
            stats.setdefault(key, FolderStats(name, None, counts[key]))

        return sorted(stats.values(), key=lambda folder: fold(folder.name))

    def folder_suggestions(self) -> list[str]:
        return [folder.name for folder in self.list_folders()]

    # -------------------------------
    # Bulk operations and statistics
    # -------------------------------

    def bulk(self, ids: Iterable[str], operation: str, data: Any = None) -> BulkResult:
        """Apply one operation to many shortcuts

        Each item goes through the regular single-item path, so all invariants hold
        per item. Failures are collected instead of raised.

        Args:
            ids (Iterable[str]):
                Shortcut ids.
            operation (str):
                One of 'delete', 'add_tags', 'remove_tag', 'move_to_folder'.
            data (Any):
                Tags to add (list or csv), tag to remove, or target folder.

        Returns:
            BulkResult: updated/failed counts and per-id errors.
        """
        if operation not in BULK_OPERATIONS:
            raise ValueError(f"Unknown bulk operation '{operation}' (expected one of: {', '.join(sorted(BULK_OPERATIONS))}).")

        result = BulkResult()
        for shortcut_id in ids:
            try:
                if operation == 'delete':
                    self.delete(shortcut_id)
                elif operation == 'add_tags':
                    current = self.require(shortcut_id)
                    extra = data.split(',') if isinstance(data, str) else list(data or [])
                    self.update(shortcut_id, {'tags': [*current.tags, *extra]})
                elif operation == 'remove_tag':
                    current = self.require(shortcut_id)
                    self.update(shortcut_id, {'tags': [t for t in current.tags if fold(t) != fold(data)]})
                else:
                    self.update(shortcut_id, {'folder': data or ''})
            except AliasNavError as e:
                result.failed += 1
                result.errors.append({'id': shortcut_id, 'error': str(e), 'errorCode': e.error_code})
            else:
                result.updated += 1

        logger.info(
            'Bulk operation finished.',
            extra={'operation': operation, 'updated': result.updated, 'failed': result.failed},
        )
        return result

    def statistics(self) -> dict[str, Any]:
        """Summarize the namespace

        Returns:
            dict: 'total', 'by_folder' (root reported as 'ungrouped'),
                  'most_used' (top 5 by access count), 'recent' (5 newest).
        """
        shortcuts = self.shortcuts.all()
        by_folder = Counter(s.folder or ROOT_FOLDER_LABEL for s in shortcuts)
        most_used = sorted(shortcuts, key=lambda s: (-s.access_count, s.composite_key))[:5]
        recent = sorted(shortcuts, key=lambda s: (s.created_at is not None, s.created_at), reverse=True)[:5]

        return {
            'total': len(shortcuts),
            'by_folder': dict(by_folder),
            'most_used': most_used,
            'recent': recent,
        }
