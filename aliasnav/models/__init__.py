from aliasnav.models.shortcut_model import ShortcutModel
from aliasnav.models.folder_model import FolderModel, FolderStats


__all__ = [
    'ShortcutModel',
    'FolderModel',
    'FolderStats',
]
