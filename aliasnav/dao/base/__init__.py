from aliasnav.dao.base.shortcut_base_dao import ShortcutBaseDAO
from aliasnav.dao.base.folder_base_dao import FolderBaseDAO


__all__ = [
    'ShortcutBaseDAO',
    'FolderBaseDAO',
]
