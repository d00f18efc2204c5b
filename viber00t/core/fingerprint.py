"""Content fingerprint for project images.

Fields are hashed in this order, each terminated by a NUL byte:

    0. the format version ("v1")
    1. project name
    2. agent
    3. privileged ("true" / "false")
    4. every package, in listed order
    5. a "|" marker, then every environment, in listed order
    6. the config file modification time in whole seconds, when known

Changing this order changes every fingerprint and therefore invalidates every
cached project image. Bump FINGERPRINT_VERSION when doing so.
"""

import hashlib
from typing import Optional

from ..models.config import EffectiveConfig

FINGERPRINT_VERSION = 1
FINGERPRINT_LENGTH = 12


def compute_fingerprint(config: EffectiveConfig, config_mtime: Optional[int]) -> str:
    """Return a short hex digest of the image-relevant parts of ``config``."""
    h = hashlib.sha256()

    def feed(value: str) -> None:
        h.update(value.encode("utf-8"))
        h.update(b"\0")

    feed(f"v{FINGERPRINT_VERSION}")
    feed(config.project_name)
    feed(config.agent)
    feed("true" if config.privileged else "false")
    for package in config.packages:
        feed(package)
    feed("|")
    for env in config.envs:
        feed(env.value)
    if config_mtime is not None:
        feed(str(config_mtime))

    return h.hexdigest()[:FINGERPRINT_LENGTH]
