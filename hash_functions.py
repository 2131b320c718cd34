from errors import InvalidConfiguration


# Every hash function takes the table (only its size is read) and a string key and returns a
# bucket index in [0, table.size). Keys are hashed on their UTF-8 bytes so that "first" and
# "last" are unsigned byte values and the length is a byte count. The empty string always
# lands in bucket 0. A table binds one of these at construction, so insert, lookup and remove
# always agree on the bucket a key belongs to.


def key_bytes(key):
    return key.encode("utf-8")


# Naive baseline: clusters every key sharing a first character into one bucket. O(1)
def first_char_hash(table, key):
    data = key_bytes(key)
    if not data:
        return 0
    return data[0] % table.size


# Sum of three cheap features of the key. This is the default strategy. O(1)
def combined_hash(table, key):
    return combined_value(key) % table.size


# Same features as combined_hash, reduced with a bit mask. The mask only equals the modulo
# when the size is a power of two, which HashTable checks through requires_power_of_two. O(1)
def masked_combined_hash(table, key):
    return combined_value(key) & (table.size - 1)


masked_combined_hash.requires_power_of_two = True


def combined_value(key):
    data = key_bytes(key)
    if not data:
        return 0
    return len(data) + data[0] + data[-1]


def requires_power_of_two(hash_function):
    return getattr(hash_function, "requires_power_of_two", False)


def is_power_of_two(n):
    return n > 0 and n & (n - 1) == 0


HASH_FUNCTIONS = {
    "first_char": first_char_hash,
    "combined": combined_hash,
    "masked_combined": masked_combined_hash,
}


# Looks up a registered hash function by name, used when the strategy comes from configuration
# or user input. O(1)
def get_hash_function(name):
    try:
        return HASH_FUNCTIONS[name]
    except KeyError:
        raise InvalidConfiguration(
            "unknown hash function %r, expected one of: %s" % (name, ", ".join(sorted(HASH_FUNCTIONS)))
        ) from None


def hash_function_name(hash_function):
    for name, function in HASH_FUNCTIONS.items():
        if function is hash_function:
            return name
    return getattr(hash_function, "__name__", repr(hash_function))
