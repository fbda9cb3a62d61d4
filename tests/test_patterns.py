from __future__ import annotations

from core.patterns import DEFAULT_PATTERNS, build_patterns


def test_default_patterns_cover_common_failures() -> None:
    pattern_set = build_patterns(DEFAULT_PATTERNS)
    lines = [
        "sshd[811]: Failed password for root from 10.0.0.5 port 22 ssh2",
        "sshd[812]: Failed password for invalid user admin from 10.0.0.5 port 4242",
        "sshd[813]: pam_unix(sshd:auth): authentication failure; logname= uid=0 euid=0 tty=ssh ruser= rhost=10.0.0.5",
        "login[900]: FAILED LOGIN (1) on '/dev/tty2' FOR 'root', Authentication failure",
        "sshd[814]: PAM: user unknown admin from 10.0.0.5",
    ]

    assert len(pattern_set) == len(DEFAULT_PATTERNS)
    assert pattern_set.rejected == ()
    for line in lines:
        assert pattern_set.match(line) is not None, line


def test_default_patterns_ignore_successful_logins() -> None:
    pattern_set = build_patterns(DEFAULT_PATTERNS)
    assert pattern_set.match("sshd[815]: Accepted password for root from 10.0.0.5 port 22 ssh2") is None


def test_first_configured_pattern_wins() -> None:
    pattern_set = build_patterns([r"invalid user", r"Failed password"])
    match = pattern_set.match("Failed password for invalid user admin from 10.0.0.5 port 22")
    assert match is not None
    assert match.pattern == "invalid user"


def test_matching_is_case_sensitive() -> None:
    pattern_set = build_patterns([r"FAILED LOGIN"])
    assert pattern_set.match("failed login for root") is None


def test_invalid_patterns_are_reported_not_raised() -> None:
    pattern_set = build_patterns(["*bad", r"ok \d+"])
    assert len(pattern_set) == 1
    assert pattern_set.rejected[0].source == "*bad"
    assert pattern_set.rejected[0].error
