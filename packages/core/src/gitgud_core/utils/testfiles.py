"""Locate test files by naming convention.

We match on file names only, never on content or imports, so the same rules
work for every language the classifier knows about.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import PurePosixPath

# {stem} = filename without extension, {suffix} = extension including the dot.
_TEST_PATTERNS = [
    "test_{stem}{suffix}",  # Python:      test_reviewer.py
    "{stem}_test{suffix}",  # Go / Rust:   reviewer_test.go
    "{stem}Test{suffix}",  # Java:        ReviewerTest.java
    "{stem}Tests{suffix}",  # Java:        ReviewerTests.java
    "{stem}.test{suffix}",  # JS / TS:     reviewer.test.ts
    "{stem}.spec{suffix}",  # JS / TS:     reviewer.spec.js
    "{stem}_spec{suffix}",  # Ruby:        reviewer_spec.rb
]

_TEST_NAME_RE = re.compile(
    r"""(
        ^test_.+\.\w+$          # test_reviewer.py
      | .+_test\.\w+$           # reviewer_test.go
      | .+Tests?\.java$         # ReviewerTest.java
      | .+\.(test|spec)\.\w+$   # reviewer.test.js
      | .+_spec\.\w+$           # reviewer_spec.rb
    )""",
    re.VERBOSE,
)


def is_test_file(file_path: str) -> bool:
    return bool(_TEST_NAME_RE.match(PurePosixPath(file_path).name))


def find_test_file(file_path: str, candidates: Iterable[str]) -> str | None:
    """Return the test file paired with ``file_path`` among ``candidates``, or None.

    Candidates are matched on basename, so a test kept in a separate tree
    (``src/foo.py`` paired with ``tests/test_foo.py``) is found too. When
    several candidates share the name, the one in the same directory wins.
    """
    path = PurePosixPath(file_path)
    by_name: dict[str, list[str]] = {}
    for candidate in candidates:
        if candidate != file_path:
            by_name.setdefault(PurePosixPath(candidate).name, []).append(candidate)

    for pattern in _TEST_PATTERNS:
        name = pattern.format(stem=path.stem, suffix=path.suffix)
        matches = by_name.get(name)
        if matches:
            same_dir = [m for m in matches if PurePosixPath(m).parent == path.parent]
            return (same_dir or sorted(matches))[0]

    return None
