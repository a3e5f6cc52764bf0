"""
Decoder for the ``git log -z`` revision stream.

The log is requested with LOG_FORMAT, so every NUL-separated token reads::

    log size <n>                          (emitted by --log-size)
    <mark><sha>X<parent> <parent>...
    <committer name><<committer email>>
    <author name><<author email>>
    <author timestamp>
    <subject>
    <body><space>

Tokens are decoded in order; the first token whose first line does not match
stops the stream and everything after it is dropped.
"""

import logging
import re
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .models import CommitInfo

logger = logging.getLogger(__name__)

LOG_FORMAT = "%m%HX%P%n%cn<%ce>%n%an<%ae>%n%at%n%s%n%b "
LOG_SIZE_PREFIX = "log size "
BOUNDARY_MARKS = "<>-=+"

_SHA_RE = re.compile(r"^[0-9a-f]{40}([0-9a-f]{24})?$")


def build_log_command(scope: str) -> List[str]:
    """Arguments for the bulk history request; ``scope`` is ``--all`` or a branch."""
    command = [
        "log",
        "--date-order",
        "--no-color",
        "--log-size",
        "--parents",
        "--boundary",
        "-z",
        f"--pretty=format:{LOG_FORMAT}",
    ]
    if scope:
        command.append(scope)
    return command


def split_revisions(buffer: Union[bytes, str]) -> List[str]:
    """Split a raw log buffer into tokens, strictly on NUL."""
    if isinstance(buffer, bytes):
        buffer = buffer.decode("utf-8", errors="replace")
    return buffer.split("\0")


def _split_identity(field: str) -> Tuple[str, str]:
    name, sep, email = field.rpartition("<")
    if not sep or not email.endswith(">"):
        return field, ""
    return name, email[:-1]


def _parse_header(header: str) -> Optional[Tuple[str, str, List[str]]]:
    if len(header) < 2 or header[0] not in BOUNDARY_MARKS:
        return None

    sha, sep, parent_list = header[1:].partition("X")
    if not sep or not _SHA_RE.match(sha):
        return None

    parents = parent_list.split()
    if not all(_SHA_RE.match(parent) for parent in parents):
        return None
    return header[0], sha, parents


def parse_commit(token: str, sequence_index: int = 0) -> Optional[CommitInfo]:
    """Decode one token, or return None when it is malformed.

    Only the first line (marker, hash and parents) decides whether the token
    is a commit. Missing or unreadable identity, timestamp and message fields
    fall back to empty values.
    """
    if token.startswith(LOG_SIZE_PREFIX):
        token = token.partition("\n")[2]

    # Drop the trailing space appended by the format string
    if token.endswith(" "):
        token = token[:-1]

    fields = token.split("\n", 5)
    header = _parse_header(fields[0])
    if header is None:
        return None
    mark, sha, parents = header

    fields += [""] * (6 - len(fields))
    committer = _split_identity(fields[1])
    author = _split_identity(fields[2])
    try:
        timestamp = int(fields[3])
    except ValueError:
        timestamp = 0

    return CommitInfo(
        sha=sha,
        parents=parents,
        boundary_mark=mark,
        committer_name=committer[0],
        committer_email=committer[1],
        author_name=author[0],
        author_email=author[1],
        author_timestamp=timestamp,
        subject=fields[4],
        body=fields[5],
        sequence_index=sequence_index,
    )


def iter_commits(tokens: Iterable[str]) -> Iterator[CommitInfo]:
    """Yield decoded commits numbered from 1, stopping at the first bad token."""
    for index, token in enumerate(tokens, start=1):
        commit = parse_commit(token, index)
        if commit is None:
            if token:
                logger.warning(f"Malformed revision at position {index}; ignoring the rest of the log.")
            return
        yield commit
