import hashlib
import logging
import re


def configure_logging(level="INFO"):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def dedupe_preserve_order(items):
    seen, out = set(), []
    for x in items or []:
        if x not in seen:
            seen.add(x)
            out.append(x)
    return out


def slugify(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", str(s).lower()).strip("-")


def stable_index(key: str, modulo: int) -> int:
    """Index derived from the key's md5, identical across processes."""
    digest = hashlib.md5(str(key).encode()).hexdigest()
    return int(digest[:8], 16) % modulo
