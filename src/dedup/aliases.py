from dedup.core.models import DedupStrategy, HashWidth

STRATEGY_ALIASES = {
    "map": DedupStrategy.MAP,
    "sorted": DedupStrategy.SORTED,
}

STRATEGY_CHOICES = list(STRATEGY_ALIASES.keys())

STRATEGY_HELP_TEXT = "Storage strategy for candidate narrowing:\n" + "".join(
    f"  {alias:<8}: {strategy.description}"
    + (" (default)" if strategy is DedupStrategy.MAP else "") + "\n"
    for alias, strategy in STRATEGY_ALIASES.items()
)

HASH_WIDTH_CHOICES = [width.value for width in HashWidth]

HASH_WIDTH_HELP_TEXT = (
    "Hash digest size in bytes, valid values are "
    + ", ".join(str(w) for w in HASH_WIDTH_CHOICES)
    + ". Default: 8"
)

BYTES_HELP_TEXT = (
    "Number of bytes from the beginning of each file that are used in the\n"
    "short hash (e.g. 4096, 4K, 1MB). 0 means that the whole file is hashed.\n"
    "Default: 4096"
)

EPILOG_TEXT = """
Examples:
  List duplicates in two directories, searching recursively
  %(prog)s -r -l ~/Photos ~/Backup/Photos

  Print only how many duplicates there are and how much space they take
  %(prog)s -r -s ~/Downloads

  Choose interactively which files to keep in each set
  %(prog)s -r -d ~/Downloads

  Delete without asking: files under earlier paths are kept, then the oldest
  %(prog)s -r -dd ~/Photos ~/Backup/Photos

  Replace duplicates with hard links (or symbolic links with -y)
  %(prog)s -r -k ~/Photos
"""
