import csv
import logging
import os
import sys

from containers import HashTable, display
from errors import HashTableError, PreconditionViolation
from hash_functions import HASH_FUNCTIONS, get_hash_function

logger = logging.getLogger(__name__)

DEFAULT_TABLE_SIZE = 8
DEFAULT_KEYS_FILE = "keys.csv"
LOG_LEVEL_VARIABLE = "CHAINED_HASH_LOG_LEVEL"


class Session(object):
    # Holds what the menu works on: the key-value pairs read from the csv file and the table size
    # used for every comparison. O(1)
    def __init__(self, pairs, size=DEFAULT_TABLE_SIZE):
        self.pairs = pairs
        self.size = size

    # Builds a fresh table with the named hash function and loads every pair into it. O(n)
    def build_table(self, name):
        table = HashTable(self.size, get_hash_function(name))
        for key, value in self.pairs:
            table.add(key, value)
        return table


# Utility method for converting a csv file of "key,value" rows into a list of (key, value) tuples.
# The file must be UTF-8. Blank lines are skipped. Runs in O(n).
def read_pairs(file_path):
    pairs = []
    try:
        with open(file_path, newline="", encoding="utf-8") as file:
            rows = list(csv.reader(file))
    except UnicodeDecodeError as e:
        raise PreconditionViolation("%s is not valid UTF-8: %s" % (file_path, e)) from None
    for line_number, row in enumerate(rows, 1):
        if not row or not "".join(row).strip():
            continue
        if len(row) != 2:
            raise PreconditionViolation("%s:%d: expected key,value but got %r" % (file_path, line_number, row))
        key = row[0].strip()
        try:
            value = int(row[1])
        except ValueError:
            raise PreconditionViolation(
                "%s:%d: value %r is not an integer" % (file_path, line_number, row[1])
            ) from None
        pairs.append((key, value))
    logger.info("Read %d pairs from %s", len(pairs), file_path)
    return pairs


# Utility method to add spaces before or after a string. Runs in O(1)
def pad_spaces(string, total_length, before=False):
    spaces = " " * (total_length - len(string))
    if before:
        padded = spaces + string
    else:
        padded = string + spaces
    return padded


# Builds one table per registered hash function and returns a text report of how each spreads the
# keys. Hash functions that cannot work with the current size are reported instead of skipped
# silently. O(n) per hash function
def compare_hash_functions(session):
    lines = [
        "Table size: " + str(session.size) + ", keys: " + str(len(session.pairs)),
        pad_spaces("Hash function", 16) + " | Total | Collisions | Longest chain",
    ]
    for name in HASH_FUNCTIONS:
        try:
            table = session.build_table(name)
        except HashTableError as e:
            lines.append(pad_spaces(name, 16) + " | " + str(e))
            continue
        total = pad_spaces(str(len(table)), 5, True)
        collisions = pad_spaces(str(table.collisions()), 10, True)
        longest = pad_spaces(str(max(table.chain_lengths())), 13, True)
        lines.append(pad_spaces(name, 16) + " | " + total + " | " + collisions + " | " + longest)
        table.destroy()
    return "\n".join(lines)


# Displays main menu and prompts for user selection. Returns False once the user picks exit.
def display_menu(session):
    print("Welcome to the chained hash table explorer!")
    print("Please select from the following options:")
    print("1: Compare collisions of every hash function")
    print("2: Display the table for one hash function")
    print("3: Change the table size (currently " + str(session.size) + ")")
    print("4: Exit")
    return parse_menu_selection(input("Your selection: "), session)


# Executes main menu selection of the user or prints an error and lets the menu come back.
def parse_menu_selection(user_input, session):
    run_again = True
    user_input = user_input.strip()
    if user_input == "1":
        print(compare_hash_functions(session))
    elif user_input == "2":
        select_hash_function(session)
    elif user_input == "3":
        select_size(session)
    elif user_input == "4":
        run_again = False
    else:
        print("Sorry, that is an invalid selection.")
    return run_again


def select_hash_function(session):
    print("Which hash function? (" + ", ".join(HASH_FUNCTIONS) + ")")
    parse_hash_function_selection(input("Hash function: "), session)


def parse_hash_function_selection(user_input, session):
    try:
        table = session.build_table(user_input.strip())
    except HashTableError as e:
        print("Sorry, " + str(e) + ".")
        return None
    print(display(table))
    print("Collisions: " + str(table.collisions()))
    return table


def select_size(session):
    print("How many buckets should the table have?")
    parse_size_selection(input("Size: "), session)


# Accepts any positive integer. Hash functions that need a power of two report the problem when
# they are used rather than here.
def parse_size_selection(user_input, session):
    try:
        size = int(user_input)
        if size <= 0:
            raise ValueError
    except ValueError:
        print("Sorry, the size must be a positive integer.")
        return False
    session.size = size
    return True


def program_running(session):
    run_again = display_menu(session)
    print(" ")
    return run_again


def configure_logging():
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_VARIABLE, "WARNING").upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


# Program launcher. The keys file can be given as the only argument.
def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    configure_logging()
    file_path = argv[0] if argv else DEFAULT_KEYS_FILE
    try:
        session = Session(read_pairs(file_path))
    except (OSError, HashTableError) as e:
        print("Could not load keys: " + str(e))
        return 1
    while program_running(session):
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
