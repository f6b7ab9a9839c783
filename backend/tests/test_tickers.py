"""Tests for Phase 1 ticker normalization and validation."""

import pytest

from stockresearch.phases.phase1.tickers import (
    TICKER_STOPLIST,
    extract_explicit_ticker,
    extract_ticker_from_text,
    find_ticker_candidates,
    is_plausible_ticker,
    normalize_ticker,
    unique_tickers,
)


class TestNormalizeTicker:
    """normalize_ticker behavior."""

    def test_uppercases_and_strips_symbols(self):
        assert normalize_ticker(" $nvda! ") == "NVDA"

    def test_keeps_class_suffix(self):
        assert normalize_ticker("brk.b") == "BRK.B"
        assert normalize_ticker("rds-a") == "RDS-A"

    def test_drops_leading_dots(self):
        assert normalize_ticker(".msft") == "MSFT"
        assert normalize_ticker("..a") == "A"

    def test_empty_input(self):
        assert normalize_ticker("") == ""
        assert normalize_ticker(None) == ""

    @pytest.mark.parametrize(
        "raw",
        ["nvda", " $TSLA ", "..a.b", ".-x", "Microsoft Corp.", "ß-straße", "brk.b", "", "((GOOGL))", "ı"],
    )
    def test_idempotent(self, raw):
        once = normalize_ticker(raw)
        assert normalize_ticker(once) == once


class TestIsPlausibleTicker:
    """Shape pattern plus stoplist."""

    def test_accepts_common_tickers(self):
        for token in ("NVDA", "MSFT", "F", "BRK.B", "RDS-A", "GOOGL"):
            assert is_plausible_ticker(token) is True

    def test_rejects_bad_shapes(self):
        for token in ("", "TOOLONG", "nvda", "BRK.BBB", "A B", "-A"):
            assert is_plausible_ticker(token) is False

    def test_rejects_trailing_newline(self):
        assert is_plausible_ticker("NVDA\n") is False
        assert is_plausible_ticker("NVDA ") is False

    def test_rejects_every_stoplist_entry(self):
        for token in TICKER_STOPLIST:
            assert is_plausible_ticker(token) is False

    def test_etf_rejected_nvda_accepted(self):
        assert is_plausible_ticker("ETF") is False
        assert is_plausible_ticker("NVDA") is True


class TestExtractExplicitTicker:
    """Cash-tags win over bare uppercase runs."""

    def test_cashtag(self):
        assert extract_explicit_ticker("thoughts on $tsla lately") == "TSLA"

    def test_cashtag_preferred_over_bare(self):
        assert extract_explicit_ticker("NVDA vs $AMD") == "AMD"

    def test_bare_uppercase_run(self):
        assert extract_explicit_ticker("NVDA") == "NVDA"

    def test_skips_stoplisted_acronyms(self):
        assert extract_explicit_ticker("AI chips from NVDA") == "NVDA"

    def test_lowercase_text_has_no_ticker(self):
        assert extract_explicit_ticker("quantum computing") == ""

    def test_only_stoplist(self):
        assert extract_explicit_ticker("USD and ETF flows") == ""


class TestExtractTickerFromText:
    """Priority: parenthesized, exchange-prefixed, bare."""

    def test_parenthesized(self):
        assert extract_ticker_from_text("IonQ Inc. (IONQ) Stock Price & News") == "IONQ"

    def test_exchange_prefix(self):
        assert extract_ticker_from_text("Rigetti Computing NASDAQ: RGTI shares") == "RGTI"

    def test_parenthesized_beats_exchange(self):
        assert extract_ticker_from_text("NYSE: IBM listed peer (QBTS)") == "QBTS"

    def test_bare_token(self):
        assert extract_ticker_from_text("shares of IONQ jumped") == "IONQ"

    def test_stoplisted_paren_falls_through(self):
        assert extract_ticker_from_text("earnings (EPS) for NYSE: GE") == "GE"

    def test_nothing_found(self):
        assert extract_ticker_from_text("no symbols here") == ""


class TestCandidates:
    def test_find_ticker_candidates_unique_in_order(self):
        assert find_ticker_candidates("NVDA, AMD and NVDA again; CEO says INTC") == ["NVDA", "AMD", "INTC"]

    def test_unique_tickers_normalizes_and_filters(self):
        assert unique_tickers(["nvda", "NVDA", "etf", "", "msft"]) == ["NVDA", "MSFT"]
