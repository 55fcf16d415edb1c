"""
Tests for the engine tracer.
"""

from decimal import Decimal

from tradedoc_engines.tracer import compute_input_fingerprint, traced_engine


@traced_engine("demo", "2.1", fingerprint_fields=("amount", "search"))
def _demo_engine(amount, *, search="", page=1):
    return amount * 2


class TestComputeInputFingerprint:

    def test_deterministic(self):
        args = {"amount": Decimal("10.0"), "search": "x"}
        assert compute_input_fingerprint(("amount", "search"), args) == compute_input_fingerprint(
            ("amount", "search"), dict(args),
        )

    def test_decimal_normalized(self):
        first = compute_input_fingerprint(("amount",), {"amount": Decimal("10.00")})
        second = compute_input_fingerprint(("amount",), {"amount": Decimal("10")})
        assert first == second

    def test_unlisted_fields_ignored(self):
        first = compute_input_fingerprint(("amount",), {"amount": 1, "page": 1})
        second = compute_input_fingerprint(("amount",), {"amount": 1, "page": 9})
        assert first == second

    def test_sixteen_hex_chars(self):
        fp = compute_input_fingerprint(("a",), {})
        assert len(fp) == 16
        int(fp, 16)


class TestTracedEngine:

    def test_result_passes_through(self):
        assert _demo_engine(Decimal("3")) == Decimal("6")

    def test_emits_trace(self, captured_logs):
        _demo_engine(Decimal("3"), search="abc")

        traces = [r for r in captured_logs() if r["message"] == "TRADEDOC_ENGINE_TRACE"]
        assert len(traces) == 1
        trace = traces[0]
        assert trace["engine_name"] == "demo"
        assert trace["engine_version"] == "2.1"
        assert trace["function"] == "_demo_engine"
        assert trace["duration_ms"] >= 0

    def test_positional_and_keyword_fingerprint_agree(self, captured_logs):
        _demo_engine(Decimal("3"), search="")
        _demo_engine(amount=Decimal("3"))

        traces = [r for r in captured_logs() if r["message"] == "TRADEDOC_ENGINE_TRACE"]
        assert traces[0]["input_fingerprint"] == traces[1]["input_fingerprint"]
