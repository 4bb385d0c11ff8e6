from __future__ import annotations
from typing import Dict, Optional, Protocol

from sqlalchemy.orm import Session

from .models import StorageEntry


class KeyValueStorage(Protocol):
	def get_item(self, key: str) -> Optional[str]: ...

	def set_item(self, key: str, value: str) -> None: ...

	def remove_item(self, key: str) -> None: ...


class MemoryStorage:
	"""Process-local storage, used by presenters that do not need durability."""

	def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
		self._items: Dict[str, str] = dict(initial or {})

	def get_item(self, key: str) -> Optional[str]:
		return self._items.get(key)

	def set_item(self, key: str, value: str) -> None:
		self._items[key] = value

	def remove_item(self, key: str) -> None:
		self._items.pop(key, None)


class SqlStorage:
	"""Durable storage on the ``client_storage`` table, one row per key."""

	def __init__(self, db: Session) -> None:
		self.db = db

	def get_item(self, key: str) -> Optional[str]:
		# Reload the row; another session may have committed since this one last read it
		row = self.db.get(StorageEntry, key, populate_existing=True)
		return row.value if row is not None else None

	def set_item(self, key: str, value: str) -> None:
		row = self.db.get(StorageEntry, key)
		if row is None:
			row = StorageEntry(key=key, value=value)
		else:
			row.value = value
		self.db.add(row)
		self.db.commit()

	def remove_item(self, key: str) -> None:
		row = self.db.get(StorageEntry, key)
		if row is not None:
			self.db.delete(row)
			self.db.commit()
