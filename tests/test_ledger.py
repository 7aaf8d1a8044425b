"""Tests for row normalization and document balance validation."""

import itertools
from decimal import Decimal

import pytest

from ledgerdesk.domain.chart import ChartIndex
from ledgerdesk.domain.entities import LedgerRow
from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.ledger import (
    DocumentEditor,
    LedgerSettings,
    apply_edit,
    blank_row,
    calculate_total,
    compute_equivalent,
    normalize_rows,
    validate_rows,
)


def row(**kwargs) -> LedgerRow:
    kwargs.setdefault("currency", "LBP")
    return LedgerRow(**kwargs)


class TestComputeEquivalent:
    """Tests for currency-normalized row values."""

    def test_default_currency_debit_only(self):
        assert compute_equivalent(row(debit="100")) == Decimal("100")

    def test_default_currency_credit_only(self):
        assert compute_equivalent(row(credit="250.5")) == Decimal("250.5")

    def test_default_currency_both_is_empty(self):
        assert compute_equivalent(row(debit="100", credit="100")) is None

    def test_default_currency_neither_is_empty(self):
        assert compute_equivalent(row()) is None

    def test_default_currency_ignores_rate(self):
        assert compute_equivalent(row(debit="100", rate="90")) == Decimal("100")

    def test_foreign_currency_with_rate(self):
        """USD 50 at 90 is 4500 LBP."""
        assert compute_equivalent(row(currency="USD", debit="50", rate="90")) == Decimal("4500")

    def test_foreign_currency_credit_with_rate(self):
        assert compute_equivalent(row(currency="EUR", credit="10", rate="1.5")) == Decimal("15.0")

    def test_foreign_currency_both_is_empty(self):
        assert compute_equivalent(row(currency="USD", debit="5", credit="5", rate="90")) is None

    def test_foreign_currency_without_rate_is_empty(self):
        assert compute_equivalent(row(currency="USD", debit="50", rate="")) is None

    def test_unparseable_rate_is_empty(self):
        assert compute_equivalent(row(currency="USD", debit="50", rate="abc")) is None

    def test_blank_currency_is_default_currency(self):
        assert compute_equivalent(LedgerRow(debit="75")) == Decimal("75")

    def test_stored_lowercase_currency_is_recognized(self):
        assert compute_equivalent(LedgerRow(currency=" lbp ", debit="75")) == Decimal("75")
        result = normalize_rows([LedgerRow(currency="lbp", debit="75"), LedgerRow(currency="usd", credit="1")])
        assert result.missing_rate_rows == (1,)

    def test_configured_default_currency(self):
        settings = LedgerSettings(default_currency="USD")
        assert compute_equivalent(row(currency="USD", debit="50"), settings) == Decimal("50")
        assert compute_equivalent(row(currency="LBP", debit="50"), settings) is None


class TestNormalizeRows:
    """Tests for full-document recomputation."""

    def test_conflict_rows(self):
        result = normalize_rows([row(debit="1"), row(debit="5", credit="5"), row(credit="1")])
        assert result.conflict_rows == (1,)

    def test_missing_rate_rows(self):
        result = normalize_rows(
            [row(currency="USD", debit="50"), row(debit="1"), row(currency="EUR", credit="3", rate="2")]
        )
        assert result.missing_rate_rows == (0,)

    def test_missing_rate_flagged_without_amounts(self):
        result = normalize_rows([row(currency="EUR")])
        assert result.missing_rate_rows == (0,)

    def test_blank_amount_rows_are_advisory(self):
        result = normalize_rows([row(), row(debit="1")])
        assert result.blank_amount_rows == (0,)
        assert result.conflict_rows == ()

    def test_equivalents_recomputed_for_every_row(self):
        stale = [row(debit="10", equivalent=Decimal("999")), row(credit="10", equivalent=None)]
        result = normalize_rows(stale)
        assert [r.equivalent for r in result.rows] == [Decimal("10"), Decimal("10")]

    def test_idempotent(self):
        rows = [
            row(debit="100"),
            row(currency="USD", credit="1", rate="89500"),
            row(currency="EUR", debit="3"),
            row(debit="4", credit="4"),
        ]
        first = normalize_rows(rows)
        second = normalize_rows(first.rows)
        assert first == second

    def test_default_currency_equivalent_is_exactly_one_case(self):
        cases = [row(debit="7"), row(credit="8"), row(debit="7", credit="8"), row()]
        for r in normalize_rows(cases).rows:
            matches = [
                r.equivalent is not None and r.equivalent == Decimal(r.debit or "0") and not r.credit,
                r.equivalent is not None and r.equivalent == Decimal(r.credit or "0") and not r.debit,
                r.equivalent is None,
            ]
            assert matches.count(True) == 1


class TestCalculateTotal:
    """Tests for normalized column totals."""

    def test_sums_default_currency(self):
        rows = [row(debit="100"), row(debit="50.25"), row(credit="10")]
        assert calculate_total(rows, "debit") == Decimal("150.25")
        assert calculate_total(rows, "credit") == Decimal("10")

    def test_foreign_rows_use_their_rate(self):
        rows = [row(currency="USD", debit="2", rate="90"), row(debit="20")]
        assert calculate_total(rows, "debit") == Decimal("200")

    def test_unparseable_rate_counts_as_one(self):
        rows = [row(currency="USD", debit="2", rate="")]
        assert calculate_total(rows, "debit") == Decimal("2")

    def test_unparseable_value_contributes_zero(self):
        rows = [row(debit="abc"), row(debit="5")]
        assert calculate_total(rows, "debit") == Decimal("5")

    def test_conflicting_rows_still_count(self):
        rows = [row(debit="5", credit="3")]
        assert calculate_total(rows, "debit") == Decimal("5")
        assert calculate_total(rows, "credit") == Decimal("3")

    def test_invalid_field(self):
        with pytest.raises(ValueError):
            calculate_total([row(debit="1")], "rate")

    def test_order_invariant(self):
        rows = [
            row(debit="0.1"),
            row(currency="USD", debit="0.2", rate="89500"),
            row(currency="EUR", credit="0.3", rate="97000.5"),
            row(credit="1234.5678"),
        ]
        expected_debit = calculate_total(rows, "debit")
        expected_credit = calculate_total(rows, "credit")
        for permutation in itertools.permutations(rows):
            assert calculate_total(permutation, "debit") == expected_debit
            assert calculate_total(permutation, "credit") == expected_credit


class TestValidateRows:
    """Tests for balance reports and save eligibility."""

    def test_balanced_document(self):
        """Scenario A: one debit and one credit of 100 LBP."""
        report = validate_rows([row(debit="100", credit=""), row(debit="", credit="100")])

        assert report.total_debit == Decimal("100")
        assert report.total_credit == Decimal("100")
        assert report.is_balanced
        assert report.conflict_rows == ()
        assert report.missing_rate_rows == ()
        assert report.save_eligible
        assert report.messages == ()

    def test_missing_rate_blocks_save(self):
        """Scenario B: USD row without a rate."""
        report = validate_rows([row(currency="USD", debit="50", credit="", rate="")])

        assert report.missing_rate_rows == (0,)
        assert not report.save_eligible
        assert any("without a rate" in m for m in report.messages)

    def test_unbalanced_blocks_save(self):
        report = validate_rows([row(debit="100"), row(credit="99")])

        assert not report.is_balanced
        assert report.difference == Decimal("1")
        assert not report.save_eligible
        assert "not balanced" in report.messages[0]

    def test_conflict_blocks_save_even_when_balanced(self):
        report = validate_rows([row(debit="10", credit="10")])

        assert report.is_balanced
        assert report.conflict_rows == (0,)
        assert not report.save_eligible
        assert "Rows 1 have both" in report.messages[0]

    def test_multi_currency_balance(self):
        report = validate_rows(
            [
                row(currency="USD", debit="100", rate="89500"),
                row(credit="8950000"),
            ]
        )
        assert report.is_balanced
        assert report.save_eligible

    def test_messages_combine_all_problems(self):
        report = validate_rows([row(debit="1", credit="2"), row(currency="EUR", debit="3")])
        assert len(report.messages) == 3

    def test_exact_match_by_default(self):
        report = validate_rows([row(debit="100.001"), row(credit="100")])
        assert not report.is_balanced

    def test_tolerance_is_configurable(self):
        settings = LedgerSettings(balance_tolerance=Decimal("0.01"))
        assert validate_rows([row(debit="100.005"), row(credit="100")], settings).is_balanced
        assert not validate_rows([row(debit="100.02"), row(credit="100")], settings).is_balanced

    def test_empty_document_is_balanced(self):
        report = validate_rows([])
        assert report.is_balanced
        assert report.total_debit == Decimal("0")


class TestLedgerSettings:
    def test_default_currency_must_be_supported(self):
        with pytest.raises(ValueError):
            LedgerSettings(default_currency="GBP")

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ValueError):
            LedgerSettings(balance_tolerance=Decimal("-1"))

    def test_blank_row_uses_default_currency(self):
        assert blank_row().currency == "LBP"
        assert blank_row(LedgerSettings(default_currency="EUR")).currency == "EUR"


class TestApplyEdit:
    """Tests for single-field edits."""

    def test_account_number_fills_name(self, small_tree):
        edited = apply_edit(row(), "account_number", "41", ChartIndex(small_tree))
        assert edited.account_number == "41"
        assert edited.account_name == "Customers"

    def test_unknown_account_number_clears_name(self, small_tree):
        edited = apply_edit(row(account_name="Old"), "account_number", "999", ChartIndex(small_tree))
        assert edited.account_name == ""

    def test_account_number_without_chart_clears_name(self):
        edited = apply_edit(row(account_name="Old"), "account_number", "41")
        assert edited.account_name == ""

    def test_non_numeric_account_number_rejected(self, small_tree):
        """Scenario D: the edit is rejected and nothing changes."""
        original = row(account_number="41", account_name="Customers")
        with pytest.raises(ValidationError) as exc_info:
            apply_edit(original, "account_number", "abc", ChartIndex(small_tree))

        assert exc_info.value.code == "accountNumberNotNumeric"
        assert original.account_number == "41"
        assert original.account_name == "Customers"

    def test_helper_suppresses_name_lookup(self, small_tree):
        base = row(account_helper="7", account_name="typed")
        edited = apply_edit(base, "account_number", "41", ChartIndex(small_tree))
        assert edited.account_name == "typed"

    def test_helper_clears_name(self):
        edited = apply_edit(row(account_name="Customers"), "account_helper", "12")
        assert edited.account_helper == "12"
        assert edited.account_name == ""

    def test_blank_helper_keeps_name(self):
        edited = apply_edit(row(account_helper="12", account_name="x"), "account_helper", "")
        assert edited.account_name == "x"

    def test_non_numeric_helper_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            apply_edit(row(), "account_helper", "12b")
        assert exc_info.value.code == "accountHelperNotNumeric"

    @pytest.mark.parametrize("value", ["$41", "(41)", "4,1", "€41", "1e3", "-41", "4.1"])
    def test_account_codes_must_be_digits(self, small_tree, value):
        with pytest.raises(ValidationError) as exc_info:
            apply_edit(row(), "account_number", value, ChartIndex(small_tree))
        assert exc_info.value.code == "accountNumberNotNumeric"

        with pytest.raises(ValidationError) as exc_info:
            apply_edit(row(), "account_helper", value)
        assert exc_info.value.code == "accountHelperNotNumeric"

    def test_account_code_is_trimmed(self, small_tree):
        edited = apply_edit(row(), "account_number", " 41 ", ChartIndex(small_tree))
        assert edited.account_number == "41"
        assert edited.account_name == "Customers"

    @pytest.mark.parametrize("field_name,code", [
        ("debit", "debitNotNumeric"),
        ("credit", "creditNotNumeric"),
        ("rate", "rateNotNumeric"),
    ])
    def test_amounts_must_be_numeric(self, field_name, code):
        with pytest.raises(ValidationError) as exc_info:
            apply_edit(row(), field_name, "ten")
        assert exc_info.value.code == code

    def test_amount_accepts_blank(self):
        assert apply_edit(row(debit="5"), "debit", "").debit == ""

    def test_currency_normalized_and_validated(self):
        assert apply_edit(row(), "currency", "usd").currency == "USD"
        with pytest.raises(ValidationError) as exc_info:
            apply_edit(row(), "currency", "GBP")
        assert exc_info.value.code == "currencyNotSupported"

    def test_equivalent_read_only(self):
        with pytest.raises(ValidationError) as exc_info:
            apply_edit(row(), "equivalent", "5")
        assert exc_info.value.code == "equivalentReadOnly"

    def test_unknown_field(self):
        with pytest.raises(ValidationError) as exc_info:
            apply_edit(row(), "colour", "red")
        assert exc_info.value.code == "unknownField"

    def test_free_text_fields(self):
        edited = apply_edit(row(), "description", "Rent for March")
        edited = apply_edit(edited, "account_name", "Landlord")
        assert edited.description == "Rent for March"
        assert edited.account_name == "Landlord"


class TestDocumentEditor:
    """Tests for the in-memory editing session."""

    def test_every_edit_recomputes_report(self, small_tree):
        editor = DocumentEditor([blank_row()], chart_index=ChartIndex(small_tree))
        editor.set_field(0, "account_number", "53")
        editor.set_field(0, "debit", "100")
        assert not editor.report.is_balanced

        index = editor.add_row()
        editor.set_field(index, "account_number", "41")
        editor.set_field(index, "credit", "100")

        assert editor.report.is_balanced
        assert editor.report.save_eligible
        assert [r.account_name for r in editor.rows] == ["Cash", "Customers"]
        assert [r.equivalent for r in editor.rows] == [Decimal("100"), Decimal("100")]

    def test_currency_change_recomputes_equivalent(self):
        editor = DocumentEditor([row(debit="50")])
        editor.set_field(0, "currency", "USD")
        assert editor.rows[0].equivalent is None
        assert editor.report.missing_rate_rows == (0,)

        editor.set_field(0, "rate", "90")
        assert editor.rows[0].equivalent == Decimal("4500")
        assert editor.report.missing_rate_rows == ()

    def test_rejected_edit_leaves_rows_unchanged(self):
        editor = DocumentEditor([row(account_number="41")])
        before = editor.rows
        with pytest.raises(ValidationError):
            editor.set_field(0, "account_number", "abc")
        assert editor.rows == before

    def test_row_out_of_range(self):
        editor = DocumentEditor([row()])
        with pytest.raises(ValidationError) as exc_info:
            editor.set_field(3, "debit", "1")
        assert exc_info.value.code == "rowOutOfRange"
        with pytest.raises(ValidationError):
            editor.remove_row(-1)

    def test_remove_row(self):
        editor = DocumentEditor([row(debit="1"), row(debit="5", credit="5"), row(credit="1")])
        assert editor.report.conflict_rows == (1,)

        editor.remove_row(1)

        assert len(editor.rows) == 2
        assert editor.report.save_eligible

    def test_initial_rows_are_normalized(self):
        editor = DocumentEditor([row(currency="USD", debit="2", rate="10")])
        assert editor.rows[0].equivalent == Decimal("20")
