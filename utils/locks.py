"""Readers-writer lock shared by the store and the broadcaster.

Any number of readers may hold the lock together; a writer holds it alone.
Waiting writers block new readers so a steady read load cannot starve them.
"""
from contextlib import contextmanager
import threading


class ReadWriteLock:

	def __init__(self):
		self._cond = threading.Condition(threading.Lock())
		self._readers = 0
		self._writer = False
		self._writers_waiting = 0

	@contextmanager
	def shared(self):
		"""Hold the lock in shared (read) mode for the duration of the block."""
		with self._cond:
			while self._writer or self._writers_waiting:
				self._cond.wait()
			self._readers += 1
		try:
			yield
		finally:
			with self._cond:
				self._readers -= 1
				if self._readers == 0:
					self._cond.notify_all()

	@contextmanager
	def exclusive(self):
		"""Hold the lock in exclusive (write) mode for the duration of the block."""
		with self._cond:
			self._writers_waiting += 1
			try:
				while self._writer or self._readers:
					self._cond.wait()
			finally:
				self._writers_waiting -= 1
			self._writer = True
		try:
			yield
		finally:
			with self._cond:
				self._writer = False
				self._cond.notify_all()
