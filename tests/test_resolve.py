import pytest

from alias_redirect.errors import ReferenceCodecError, ResolutionTimeoutError
from alias_redirect.models import PartialHint, Resolved, Undecodable, Unresolved
from alias_redirect.redirect.report import RunReporter
from alias_redirect.redirect.resolve import call_with_timeout, resolve_alias
from conftest import CapturingStream, make_alias


def test_live_target_resolves(tmp_path, codec, reporter):
    target = tmp_path / "file.txt"
    target.write_text("x")
    alias = make_alias(tmp_path / "link.alias", target)

    result = resolve_alias(alias, codec, reporter=reporter)

    assert result == Resolved(path=str(target), stale=False)
    assert reporter.err.lines == []


def test_stale_resolution_is_noted_but_still_resolved(tmp_path, codec, reporter):
    target = tmp_path / "file.txt"
    target.write_text("x")
    alias = make_alias(tmp_path / "link.alias", target, stale=True)

    result = resolve_alias(alias, codec, reporter=reporter)

    assert result == Resolved(path=str(target), stale=True)
    assert reporter.err.lines == [f"{alias}: stale alias"]


def test_missing_target_falls_back_to_stored_hint(tmp_path, codec, reporter):
    alias = make_alias(tmp_path / "link.alias", "/Old/missing.txt")

    result = resolve_alias(alias, codec, reporter=reporter)

    assert isinstance(result, PartialHint)
    assert result.path == "/Old/missing.txt"
    assert result.diagnostic.path == alias
    assert "resolve alias failed" in reporter.err.text


def test_no_hint_is_unresolved(tmp_path, codec, reporter):
    alias = make_alias(tmp_path / "link.alias", "/Old/missing.txt", hint=None)

    result = resolve_alias(alias, codec, reporter=reporter)

    assert isinstance(result, Unresolved)
    assert result.diagnostic.operation == "get target path"
    assert len(reporter.err.lines) == 2


def test_corrupted_record_is_undecodable(tmp_path, codec, reporter):
    alias = tmp_path / "broken.alias"
    alias.write_bytes(b"\x00\x01 not a bookmark")

    result = resolve_alias(alias, codec, reporter=reporter)

    assert isinstance(result, Undecodable)
    assert result.diagnostic.reason == "not an alias record"
    assert reporter.err.lines == [result.diagnostic.render()]
    assert codec.resolve_calls == 0


def test_quiet_mode_suppresses_diagnostics(tmp_path, codec):
    quiet_reporter = RunReporter(out=CapturingStream(), err=CapturingStream(), quiet=True)
    alias = make_alias(tmp_path / "link.alias", "/Old/missing.txt", hint=None)

    result = resolve_alias(alias, codec, reporter=quiet_reporter)

    assert isinstance(result, Unresolved)
    assert quiet_reporter.err.lines == []


def test_timeout_still_extracts_hint(tmp_path, codec, reporter):
    """
    A resolution that overruns its bound is abandoned; the stored path is used instead.
    """
    target = tmp_path / "file.txt"
    target.write_text("x")
    alias = make_alias(tmp_path / "link.alias", target)
    codec.resolve_delay_sec = 1.0

    result = resolve_alias(alias, codec, timeout_sec=0.05, reporter=reporter)

    assert isinstance(result, PartialHint)
    assert result.path == str(target)
    assert "timed out" in result.diagnostic.reason


def test_call_with_timeout_passes_through_results_and_errors(tmp_path):
    assert call_with_timeout(lambda: 42, 1.0, tmp_path) == 42
    assert call_with_timeout(lambda: 7, None, tmp_path) == 7

    def boom():
        raise KeyError("inner")

    with pytest.raises(KeyError):
        call_with_timeout(boom, 1.0, tmp_path)


def test_call_with_timeout_raises_on_overrun(tmp_path):
    import time

    with pytest.raises(ResolutionTimeoutError) as exc_info:
        call_with_timeout(lambda: time.sleep(1.0), 0.05, tmp_path / "slow.alias")

    assert exc_info.value.timeout_sec == 0.05


def test_codec_error_without_path_omits_it_from_message(tmp_path):
    pathless = ReferenceCodecError(None, "resolve alias", "volume not mounted")
    with_path = ReferenceCodecError(tmp_path / "a.alias", "resolve alias", "volume not mounted")

    assert pathless.path is None
    assert str(pathless) == "resolve alias failed - volume not mounted"
    assert str(with_path) == f"{tmp_path / 'a.alias'}: resolve alias failed - volume not mounted"
