"""SHA-256 hashing of stored answer payloads for change detection"""

import hashlib


def answer_hash(markup: str | None, blocks: str | None) -> str:
    """Hex SHA-256 over both payloads; a missing payload hashes differently from an empty one."""
    h = hashlib.sha256()
    for part in (markup, blocks):
        h.update(b"\x00" if part is None else b"\x01" + part.encode("utf-8"))
        h.update(b"\x1e")
    return h.hexdigest()
