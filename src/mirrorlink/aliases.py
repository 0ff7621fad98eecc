from mirrorlink.core.models import CollisionPolicy, DuplicateMode, HashType

DUPLICATE_MODE_ALIASES = {
    "off": DuplicateMode.OFF,
    "find": DuplicateMode.FIND_DUPLICATES,
    "consolidate": DuplicateMode.CONSOLIDATE,
}

DUPLICATE_MODE_CHOICES = list(DUPLICATE_MODE_ALIASES.keys())

DUPLICATE_MODE_HELP_TEXT = (
    "Duplicate handling (requires sha256):\n"
    + "".join(f"  {alias:<12}: {mode.description}\n" for alias, mode in DUPLICATE_MODE_ALIASES.items())
    + "Default: off\n"
    "Example:\n"
    "  %(prog)s -d /srv/mirror -o mirror.meta4 -u ftp://ftp.example.com/ --duplicates find"
)

COLLISION_ALIASES = {
    "ignore": CollisionPolicy.IGNORE,
    "warn": CollisionPolicy.WARN,
    "fail": CollisionPolicy.FAIL,
}

COLLISION_CHOICES = list(COLLISION_ALIASES.keys())

COLLISION_HELP_TEXT = (
    "Files with identical sha256 but different content:\n"
    "  ignore : Count them silently\n"
    "  warn   : Count them and log a warning (default)\n"
    "  fail   : Abort the run"
)

HASH_HELP_TEXT = (
    "Comma-separated digests to write for every file.\n"
    f"  Valid options: {', '.join(h.value for h in HashType)}. Default: sha256\n"
    "Example:\n"
    "  %(prog)s -d /srv/mirror -o mirror.meta4 -f --hash-type md5,sha1,sha256"
)

EPILOG_TEXT = """
Examples:
  Basic usage - describe a mirror directory with its FTP URLs
  %(prog)s -d /srv/mirror -o mirror.meta4 -u ftp://ftp.example.com/pub/ -c us

  Local file URLs plus content addressed ni and magnet links
  %(prog)s -d ~/Downloads -o downloads.meta4 -f --ni-url --magnet-url

  Merge identical files into one entry and show run statistics
  %(prog)s -d /srv/mirror -o mirror.meta4 -u http://mirror.example.com/ --duplicates consolidate -s

  Reproducible output (no generator, no publication date)
  %(prog)s -d /srv/mirror -o mirror.meta4 -f --sparse-output
"""
