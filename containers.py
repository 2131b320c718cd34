import logging
from collections import deque

from errors import AllocationError, InvalidConfiguration, PreconditionViolation
from hash_functions import combined_hash, hash_function_name, is_power_of_two, requires_power_of_two

logger = logging.getLogger(__name__)


class Entry(object):
    # A key-value pair stored in one bucket's chain. The chain itself is the bucket's deque,
    # so an entry carries no link to its neighbours.
    __slots__ = ("key", "value")

    def __init__(self, key, value):
        self.key = key
        self.value = value

    def __repr__(self):
        return "Entry(%r, %r)" % (self.key, self.value)


class HashTable(object):
    # Fixed-size separate-chaining table from string keys to integer values. The number of buckets
    # never changes after construction and the hash function is bound here once, so every later
    # operation maps a key to the same bucket. O(n) in the number of buckets to initialize.
    def __init__(self, size=16, hash_function=combined_hash):
        if isinstance(size, bool) or not isinstance(size, int):
            raise InvalidConfiguration("table size must be an integer, got %r" % (size,))
        if size <= 0:
            raise InvalidConfiguration("table size must be positive, got %d" % size)
        if not callable(hash_function):
            raise InvalidConfiguration("hash function must be callable, got %r" % (hash_function,))
        if requires_power_of_two(hash_function) and not is_power_of_two(size):
            raise InvalidConfiguration(
                "%s needs a power-of-two table size, got %d" % (hash_function_name(hash_function), size)
            )
        self.size = size
        self.hash_function = hash_function
        self.total = 0
        try:
            self.array = [deque() for _ in range(size)]
        except MemoryError as e:
            raise AllocationError("could not allocate %d buckets" % size) from e
        logger.info("Created hash table with %d buckets using %s", size, hash_function_name(hash_function))

    # len() reports the running total of live entries. O(1)
    def __len__(self):
        self._check_alive()
        return self.total

    def __getitem__(self, key):
        return self.get(key)

    def __setitem__(self, key, value):
        self.add(key, value)

    # Unlike remove(), del follows the mapping protocol and raises KeyError for a missing key. O(1)
    def __delitem__(self, key):
        if not self.remove(key):
            raise KeyError(key)

    # Yields (key, value) pairs bucket by bucket, newest first within a bucket.
    def __iter__(self):
        return HashTableIterator(self)

    # Only the key's own bucket is searched. O(1) if there are few hash collisions
    def __contains__(self, key):
        return self._find(key) is not None

    def __str__(self):
        return display(self)

    def __repr__(self):
        state = "destroyed" if self.array is None else "total=%d" % self.total
        return "<HashTable size=%d %s hash=%s>" % (self.size, state, hash_function_name(self.hash_function))

    # Iterates over the stored keys only. O(1) to create
    def key_iterator(self):
        return HashKeyIterator(self)

    # Iterates over the stored values only. O(1) to create
    def value_iterator(self):
        return HashValueIterator(self)

    # Index of the bucket the bound hash function assigns to key. O(1)
    def bucket_index(self, key):
        self._check_alive()
        self._check_key(key)
        index = self.hash_function(self, key)
        if not 0 <= index < self.size:
            raise PreconditionViolation(
                "%s returned %r for %r, outside [0, %d)"
                % (hash_function_name(self.hash_function), index, key, self.size)
            )
        return index

    # Adds a key-value pair, or replaces the value of an existing key. Only the key's bucket is
    # scanned for a duplicate, so an update never allocates and never changes the total. New
    # entries go to the front of the chain. O(1) if there are few hash collisions
    def add(self, key, value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise PreconditionViolation("value must be an integer, got %r" % (value,))
        bucket = self.array[self.bucket_index(key)]
        for entry in bucket:
            if entry.key == key:
                entry.value = value
                logger.debug("Updated %r to %d", key, value)
                return
        try:
            bucket.appendleft(Entry(key, value))
        except MemoryError as e:
            raise AllocationError("could not allocate an entry for %r" % key) from e
        self.total += 1
        logger.debug("Added %r=%d, total is now %d", key, value, self.total)

    # Removes the entry for key from its bucket and returns True, or returns False if the bucket
    # holds no such key. Other buckets are never searched. O(1) if there are few hash collisions
    def remove(self, key):
        bucket = self.array[self.bucket_index(key)]
        for entry in bucket:
            if entry.key == key:
                bucket.remove(entry)
                self.total -= 1
                logger.debug("Removed %r, total is now %d", key, self.total)
                return True
        logger.debug("Remove of %r found nothing", key)
        return False

    # Retrieves the value stored under the given key. O(1) if there are few hash collisions
    def get(self, key):
        entry = self._find(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    # Simultaneously removes a key-value pair and returns the value
    def pop(self, key):
        value = self.get(key)
        self.remove(key)
        return value

    # Drops every entry but keeps the bucket array and size. O(n)
    def reset(self):
        self._check_alive()
        for bucket in self.array:
            bucket.clear()
        self.total = 0
        logger.info("Reset hash table with %d buckets", self.size)

    # Releases every entry and the bucket array. Safe to call more than once; any other operation
    # on a destroyed table raises PreconditionViolation. O(n)
    def destroy(self):
        if self.array is None:
            return
        for bucket in self.array:
            bucket.clear()
        self.array = None
        self.total = 0
        logger.info("Destroyed hash table with %d buckets", self.size)

    # Sum over all buckets of (chain length - 1) for chains longer than one. Read-only: the
    # running total is left alone. O(n) in the number of buckets
    def collisions(self):
        return sum(length - 1 for length in self.chain_lengths() if length > 1)

    # Number of entries in each bucket, in bucket order. O(n) in the number of buckets
    def chain_lengths(self):
        self._check_alive()
        return [len(bucket) for bucket in self.array]

    # Entries per bucket. Informative only, the table never resizes.
    def load_factor(self):
        self._check_alive()
        return self.total / self.size

    # Entry holding key in its own bucket, or None. O(1) if there are few hash collisions
    def _find(self, key):
        for entry in self.array[self.bucket_index(key)]:
            if entry.key == key:
                return entry
        return None

    def _check_alive(self):
        if self.array is None:
            raise PreconditionViolation("hash table has been destroyed")

    @staticmethod
    def _check_key(key):
        if not isinstance(key, str):
            raise PreconditionViolation("key must be a string, got %r" % (key,))
        if not key:
            raise PreconditionViolation("key must not be empty")
        try:
            key.encode("utf-8")
        except UnicodeEncodeError:
            raise PreconditionViolation("key %r cannot be encoded as UTF-8" % (key,)) from None


class HashTableIterator(object):
    # Walks the bucket array with an outer index and the current chain with an inner index.
    # Mutating the table while iterating is not supported.
    def __init__(self, hash_table):
        hash_table._check_alive()
        self.outer = 0
        self.inner = 0
        self.ht = hash_table

    # Conforms to iterator protocol. Runs in O(1)
    def __iter__(self):
        return self

    # Skips empty buckets until the next entry turns up, then returns its (key, value) pair
    def __next__(self):
        while self.outer < len(self.ht.array):
            bucket = self.ht.array[self.outer]
            if self.inner < len(bucket):
                entry = bucket[self.inner]
                self.inner += 1
                return entry.key, entry.value
            self.outer += 1
            self.inner = 0
        raise StopIteration


class HashKeyIterator(object):
    # Provides an abstraction to iterate on the keys of the HashTable. O(1) to initialize.
    def __init__(self, hash_table):
        self.iterator = HashTableIterator(hash_table)

    # Conforms to iterator protocol. Runs in O(1)
    def __iter__(self):
        return self

    # Returns the key from the pair produced by HashTableIterator. O(1)
    def __next__(self):
        return next(self.iterator)[0]


class HashValueIterator(object):
    # Same walk as HashKeyIterator, keeping the value of each pair. O(1) to initialize.
    def __init__(self, hash_table):
        self.iterator = HashTableIterator(hash_table)

    # Conforms to iterator protocol. Runs in O(1)
    def __iter__(self):
        return self

    # Returns the value from the pair produced by HashTableIterator. O(1)
    def __next__(self):
        return next(self.iterator)[1]


# Functional interface. add() and remove() still take the hash function on every call, but it
# has to be the one the table was created with; anything else is a caller bug.

def create(size, hash_function=combined_hash):
    return HashTable(size, hash_function)


def destroy(table):
    table.destroy()


def reset(table):
    table.reset()


def add(table, hash_function, key, value):
    _check_hash_function(table, hash_function)
    table.add(key, value)


def remove(table, hash_function, key):
    _check_hash_function(table, hash_function)
    return table.remove(key)


def collisions(table):
    return table.collisions()


# Diagnostic dump: a header with size and total, then one line per bucket listing its chain in
# current order. A blank line closes the dump. O(n)
def display(table):
    table._check_alive()
    lines = ["Hash table, size=%d, total=%d" % (table.size, table.total)]
    for i, bucket in enumerate(table.array):
        chain = "".join("->(key=%s,value=%d)" % (entry.key, entry.value) for entry in bucket)
        lines.append("array[%d]%s-|" % (i, chain))
    return "\n".join(lines) + "\n\n"


def _check_hash_function(table, hash_function):
    if hash_function is not table.hash_function:
        raise PreconditionViolation(
            "table was created with %s, not %s"
            % (hash_function_name(table.hash_function), hash_function_name(hash_function))
        )
