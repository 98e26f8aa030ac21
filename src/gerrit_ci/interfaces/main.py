"""Unified entry point: dispatches to the appropriate mode.

Reads ``INPUT_MODE`` from the environment and runs the corresponding
operation:

- ``check`` (default): Verify the SSH connection to Gerrit
- ``pending``: Print the oldest change still waiting for verification
- ``list``: Print open changes of ``GERRIT_PROJECT`` (or all projects)
- ``verify``: Vote Verified +1/-1 on a patch set from the build result
- ``comment``: Post a plain comment on a patch set
"""

from __future__ import annotations

import logging
import os
import sys

logger = logging.getLogger(__name__)

_VALID_MODES = {"check", "pending", "list", "verify", "comment"}


def main() -> None:
    """Dispatch to the appropriate mode based on INPUT_MODE."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    mode = os.environ.get("INPUT_MODE", "check").strip().lower()

    if mode not in _VALID_MODES:
        valid = ", ".join(sorted(_VALID_MODES))
        logger.error("Unknown mode: %r (valid: %s)", mode, valid)
        sys.exit(1)

    from gerrit_ci.interfaces.action import run

    run(mode)


if __name__ == "__main__":
    main()
