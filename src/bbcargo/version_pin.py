"""PV suffix for recipes built from an untagged commit."""

from __future__ import annotations

PV_APPEND_KEY = "PV:append"
LEGACY_PV_APPEND_KEY = "PV_append"
SHORT_REV_LENGTH = 10


def compute_version_pin(
    is_tagged_checkout: bool,
    head_revision: str,
    legacy_override_syntax: bool = False,
) -> str | None:
    """Return the ``PV:append`` assignment, or ``None`` when no suffix is needed.

    A tagged checkout already has a stable version. Otherwise the first ten
    characters of HEAD keep two untagged commits from sharing one sstate key.
    We should be using ``${SRCPV}`` here but bitbake cannot expand it in this
    position (meta-rust issue 136).
    """
    if is_tagged_checkout:
        return None
    if len(head_revision) <= SHORT_REV_LENGTH:
        return None
    key = LEGACY_PV_APPEND_KEY if legacy_override_syntax else PV_APPEND_KEY
    return f'{key} = ".AUTOINC+{head_revision[:SHORT_REV_LENGTH]}"'
