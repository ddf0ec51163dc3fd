import warnings

import pytest

from bbcargo.errors import MutableRefWarning, PolicyError, UnresolvablePinError
from bbcargo.models import AUTOREV, BranchRef, DefaultBranchRef, GitOrigin, RevRef, TagRef
from bbcargo.policy import Policy
from bbcargo.revision import resolve_revision

URL = "https://github.com/example/bar"
PRECISE = "0123456789abcdef0123456789abcdef01234567"
QUIET = Policy(mutable_ref_policy="allow")
REPRODUCIBLE = Policy(reproducible=True, mutable_ref_policy="allow")


def test_reproducible_mode_prefers_precise_fragment_over_master_branch() -> None:
    origin = GitOrigin(url=URL, reference=BranchRef("master"), precise=PRECISE)

    pin = resolve_revision("bar", origin, policy=REPRODUCIBLE)

    assert pin.rev == PRECISE


def test_master_branch_tracks_autorev_outside_reproducible_mode() -> None:
    origin = GitOrigin(url=URL, reference=BranchRef("master"), precise=PRECISE)

    pin = resolve_revision("bar", origin, policy=QUIET)

    assert pin.rev == AUTOREV


def test_other_branch_names_are_used_verbatim() -> None:
    origin = GitOrigin(url=URL, reference=BranchRef("main"), precise=PRECISE)

    assert resolve_revision("bar", origin, policy=QUIET).rev == "main"


def test_default_branch_tracks_autorev() -> None:
    origin = GitOrigin(url=URL, reference=DefaultBranchRef())

    assert resolve_revision("bar", origin, policy=QUIET).rev == AUTOREV


@pytest.mark.parametrize("policy", [QUIET, Policy(reproducible=True)])
def test_tag_passes_through_without_precise_fragment(policy: Policy) -> None:
    origin = GitOrigin(url=URL, reference=TagRef("v1.2.3"))

    assert resolve_revision("bar", origin, policy=policy).rev == "v1.2.3"


def test_full_length_rev_is_used_as_is() -> None:
    origin = GitOrigin(url=URL, reference=RevRef(PRECISE))

    assert resolve_revision("bar", origin, policy=QUIET).rev == PRECISE


def test_short_rev_falls_back_to_precise_fragment() -> None:
    origin = GitOrigin(url=URL, reference=RevRef("abc123"), precise=PRECISE)

    assert resolve_revision("bar", origin, policy=QUIET).rev == PRECISE


def test_short_rev_without_precise_fragment_is_fatal() -> None:
    origin = GitOrigin(url=URL, reference=RevRef("abc123"))

    with pytest.raises(UnresolvablePinError) as excinfo:
        resolve_revision("bar", origin, policy=QUIET)

    assert excinfo.value.code == "E_UNRESOLVABLE_PIN"
    assert excinfo.value.context["rev"] == "abc123"


def test_pin_lines_name_the_dependency_in_order() -> None:
    origin = GitOrigin(url=URL, reference=TagRef("v1.2.3"))

    pin = resolve_revision("bar", origin, policy=QUIET)

    assert pin.pin_lines == (
        'SRCREV_FORMAT .= "_bar"',
        'SRCREV_bar = "v1.2.3"',
        'EXTRA_OECARGO_PATHS += "${WORKDIR}/bar"',
    )
    assert pin.locator == (
        "git://github.com/example/bar;protocol=https;name=bar;destsuffix=bar"
    )


def test_custom_url_mapper_receives_url_and_name() -> None:
    calls: list[tuple[str, str | None]] = []

    def mapper(url: str, name: str | None) -> str:
        calls.append((url, name))
        return f"mapped://{name}"

    origin = GitOrigin(url=URL, reference=TagRef("v1"))
    pin = resolve_revision("bar", origin, policy=QUIET, url_mapper=mapper)

    assert pin.locator == "mapped://bar"
    assert calls == [(URL, "bar")]


def test_autorev_warns_by_default() -> None:
    origin = GitOrigin(url=URL, reference=DefaultBranchRef())

    with pytest.warns(MutableRefWarning):
        pin = resolve_revision("bar", origin, policy=Policy())

    assert pin.rev == AUTOREV


def test_autorev_can_be_escalated_to_error() -> None:
    origin = GitOrigin(url=URL, reference=BranchRef("master"))

    with pytest.raises(PolicyError):
        resolve_revision("bar", origin, policy=Policy(mutable_ref_policy="error"))


def test_pinned_revision_does_not_warn() -> None:
    origin = GitOrigin(url=URL, reference=BranchRef("master"), precise=PRECISE)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        resolve_revision("bar", origin, policy=Policy(reproducible=True))

    assert not any(isinstance(item.message, MutableRefWarning) for item in caught)
