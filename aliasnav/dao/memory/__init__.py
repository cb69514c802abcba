from aliasnav.dao.memory.shortcut_memory_dao import ShortcutMemoryDAO
from aliasnav.dao.memory.folder_memory_dao import FolderMemoryDAO


__all__ = [
    'ShortcutMemoryDAO',
    'FolderMemoryDAO',
]
