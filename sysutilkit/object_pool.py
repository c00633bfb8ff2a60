"""Keyed object pool whose borrowed objects return to the pool when released."""

from __future__ import annotations

import logging
import operator
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, Generic, List, Optional, TypeVar

K = TypeVar("K")
T = TypeVar("T")

KeyPredicate = Callable[[Any, Any], bool]


@dataclass
class _Block:
    key: Any
    allocated: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock)
    objects: List[Any] = field(default_factory=list)


class PooledObject(Generic[T]):
    """A borrowed pool object; releasing it hands it back to its pool."""

    def __init__(self, pool: "ObjectPool", obj: T) -> None:
        self._pool = pool
        self._obj = obj
        self._released = False

    @property
    def obj(self) -> T:
        """The borrowed object."""
        return self._obj

    @property
    def released(self) -> bool:
        """Whether the object has already been handed back."""
        return self._released

    def release(self) -> None:
        """Hand the object back to its pool; later calls do nothing."""
        if self._released:
            return
        self._released = True
        self._pool.give_back(self._obj)

    def __enter__(self) -> T:
        return self._obj

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class ObjectPool(Generic[K, T]):
    """Pool of objects grouped into blocks by key.

    ``add`` matches blocks with ``find_pred(key, block_key)`` (equality by
    default); ``get`` matches with ``get_pred(key, block_key)`` (``<=`` by
    default), so a request may be served by a block with a larger key.
    When a matched block runs dry it is grown by its allocated count.
    """

    logger_name: ClassVar[str] = "ObjectPool"

    _instances: ClassVar[Dict[type, "ObjectPool"]] = {}
    _instances_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        create: Callable[[K], T],
        free: Optional[Callable[[T], Any]] = None,
        clear: Optional[Callable[[T], Any]] = None,
        key_of: Optional[Callable[[T], K]] = None,
        find_pred: KeyPredicate = operator.eq,
        get_pred: KeyPredicate = operator.le,
    ) -> None:
        self._create = create
        self._free = free
        self._clear = clear
        self._key_of = key_of
        self._find_pred = find_pred
        self._get_pred = get_pred
        self._blocks: List[_Block] = []
        self._blocks_lock = threading.RLock()
        self._issued: Dict[int, Any] = {}
        self._issued_lock = threading.Lock()
        self._closed = False
        self._log = logging.getLogger(self.logger_name)

    @classmethod
    def instance(cls) -> "ObjectPool":
        """Return the shared pool of this class, creating it on first use."""
        with cls._instances_lock:
            pool = ObjectPool._instances.get(cls)
            if pool is None:
                pool = cls()
                ObjectPool._instances[cls] = pool
            return pool

    @classmethod
    def destroy(cls) -> None:
        """Drop the shared pool of this class, freeing its idle objects."""
        with cls._instances_lock:
            pool = ObjectPool._instances.pop(cls, None)
        if pool is not None:
            pool.close()

    def _find_block(self, key: Any, pred: KeyPredicate) -> Optional[_Block]:
        with self._blocks_lock:
            return next((block for block in self._blocks if pred(key, block.key)), None)

    def add(self, key: K, count: int) -> None:
        """Create ``count`` objects for ``key`` and put them in the pool.

        If creation fails part way, the objects made so far stay in the pool
        and the error propagates.
        """
        with self._blocks_lock:
            block = self._find_block(key, self._find_pred)
            if block is None:
                block = _Block(key)
                self._blocks.append(block)
        with block.lock:
            created = 0
            try:
                for _ in range(count):
                    block.objects.append(self._create(key))
                    created += 1
            finally:
                block.allocated += created

    def get(self, key: K) -> Optional[PooledObject[T]]:
        """Borrow an object for ``key``; return None if none can be had."""
        block = self._find_block(key, self._get_pred)
        if block is None:
            return None
        with block.lock:
            if not block.objects:
                alloc_size = block.allocated
                try:
                    self.add(block.key, alloc_size)
                except MemoryError:
                    pass
                if not block.objects:
                    self._log.debug(
                        "Pool regrowth failed, requested key: %s, matched key: %s, count: %s.",
                        key, block.key, alloc_size,
                    )
                    return None
                self._log.debug(
                    "Pool regrowth succeeded, requested key: %s, matched key: %s, idle: %s.",
                    key, block.key, len(block.objects),
                )
            obj = block.objects.pop()
        if self._key_of is None:
            with self._issued_lock:
                self._issued[id(obj)] = block.key
        return PooledObject(self, obj)

    def _key_for(self, obj: T) -> Any:
        if self._key_of is not None:
            return self._key_of(obj)
        with self._issued_lock:
            try:
                return self._issued.pop(id(obj))
            except KeyError:
                raise LookupError("object was not issued by this pool") from None

    def give_back(self, obj: T) -> None:
        """Clear ``obj`` and return it to its block, or free it if the pool is closed."""
        if obj is None:
            return
        if self._clear is not None:
            self._clear(obj)
        if self._closed:
            if self._key_of is None:
                with self._issued_lock:
                    self._issued.pop(id(obj), None)
            if self._free is not None:
                self._free(obj)
            return
        key = self._key_for(obj)
        block = self._find_block(key, self._find_pred)
        if block is None:
            raise LookupError(f"no pool block for key {key!r}")
        with block.lock:
            block.objects.append(obj)

    def close(self) -> None:
        """Free every idle object; objects released later are freed directly."""
        with self._blocks_lock:
            if self._closed:
                return
            self._closed = True
            for block in self._blocks:
                with block.lock:
                    idle, block.objects = block.objects, []
                if self._free is not None:
                    for obj in idle:
                        self._free(obj)