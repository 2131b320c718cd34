# Exceptions raised by the hash table and its hash functions. Missing keys looked up through
# the mapping protocol still raise the built-in KeyError.


class HashTableError(Exception):
    pass


# Storage for the bucket array or a new entry could not be obtained.
class AllocationError(HashTableError, MemoryError):
    pass


# Bad table size, unknown hash function name, or a masking hash function on a size that is
# not a power of two.
class InvalidConfiguration(HashTableError, ValueError):
    pass


# The caller broke the contract of an operation: empty or non-string key, non-integer value,
# mismatched hash function, or use of a destroyed table.
class PreconditionViolation(HashTableError, ValueError):
    pass
