"""
Table prefix rewriting for sqldump.
"""

import re
from typing import Optional


class PrefixRewriter:
    """Replaces a table prefix (old to new one), case-insensitively.

    Anchored mode only touches a prefix at the very start of the text and is
    used for bare table names. Unanchored mode replaces every occurrence and
    is used for definitions, row values and replayed dump lines, where the
    prefix may sit anywhere (foreign keys, constraint names, serialized data).
    """

    def __init__(self, old_prefix: Optional[str], new_prefix: Optional[str]):
        self.old_prefix = old_prefix or ''
        self.new_prefix = new_prefix or ''

        if self.old_prefix:
            escaped = re.escape(self.old_prefix)
            self._anchored = re.compile('^' + escaped, re.IGNORECASE)
            self._unanchored = re.compile(escaped, re.IGNORECASE)
        else:
            self._anchored = None
            self._unanchored = None

    @property
    def enabled(self) -> bool:
        return bool(self.old_prefix)

    def replace(self, text: str, anchored: bool = True) -> str:
        """Replace the old prefix in text.

        Args:
            text: Table name, statement or value to rewrite.
            anchored: Match only at the start of the text when True,
                everywhere when False.
        """
        if not self.enabled:
            return text

        pattern = self._anchored if anchored else self._unanchored
        # Callable replacement keeps backslashes in the new prefix literal
        return pattern.sub(lambda _: self.new_prefix, text)
