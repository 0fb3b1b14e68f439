from decimal import Decimal

from deduplication import existing_fingerprints, filter_new, fingerprint, format_amount
from tests.helpers import make_transaction


class TestFingerprint:
    """Tests for fingerprint function."""

    def test_format(self):
        """Test the date|description|amount layout."""
        transaction = make_transaction("2024-11-01", "Salary Deposit", "15000")

        assert fingerprint(transaction) == "2024-11-01|salary deposit|15000.00"

    def test_description_case_is_ignored(self):
        """Test that descriptions differing only in case collide."""
        a = make_transaction(description="WOOLWORTHS")
        b = make_transaction(description="woolworths")

        assert fingerprint(a) == fingerprint(b)

    def test_amount_rounded_to_cents(self):
        """Test that amounts are compared to two decimal places."""
        a = make_transaction(amount="-10.004")
        b = make_transaction(amount="-10")

        assert fingerprint(a) == fingerprint(b)

    def test_category_and_id_ignored(self):
        """Test that only content fields take part."""
        a = make_transaction(category="Food")
        b = make_transaction(category="Transport")

        assert a.id != b.id
        assert fingerprint(a) == fingerprint(b)

    def test_format_amount_half_up(self):
        """Test that half cents round away from zero."""
        assert format_amount(Decimal("0.125")) == "0.13"
        assert format_amount(Decimal("-0.125")) == "-0.13"

    def test_format_amount_large_values(self):
        """Test amounts wider than the default decimal precision."""
        assert format_amount(Decimal("1e30")) == "1" + "0" * 30 + ".00"
        assert (
            format_amount(Decimal("12345678901234567890123456789"))
            == "12345678901234567890123456789.00"
        )

    def test_large_amount_fingerprint(self):
        """Test that a very large amount still produces a key."""
        transaction = make_transaction("2024-11-01", "Big", "1e30")

        assert fingerprint(transaction) == "2024-11-01|big|1" + "0" * 30 + ".00"


class TestFilterNew:
    """Tests for filter_new function."""

    def test_drops_existing(self):
        """Test that already stored transactions are rejected."""
        stored = [make_transaction("2025-01-01", "Coffee", "-10")]
        candidates = [
            make_transaction("2025-01-01", "coffee", "-10.00"),
            make_transaction("2025-01-02", "Coffee", "-10"),
        ]

        accepted = filter_new(candidates, stored)

        assert accepted == [candidates[1]]

    def test_one_cent_difference_accepted(self):
        """Test that amounts one cent apart are different lines."""
        stored = [make_transaction("2025-01-01", "Coffee", "-10.00")]
        candidate = make_transaction("2025-01-01", "Coffee", "-10.01")

        assert filter_new([candidate], stored) == [candidate]

    def test_accepts_fingerprint_set(self):
        """Test passing precomputed fingerprints instead of transactions."""
        stored = [make_transaction("2025-01-01", "Coffee", "-10")]
        candidate = make_transaction("2025-01-01", "Coffee", "-10")

        assert filter_new([candidate], existing_fingerprints(stored)) == []

    def test_accepts_fingerprint_list(self):
        """Test that fingerprints may come in a list or tuple."""
        stored = make_transaction("2025-01-01", "Coffee", "-10")
        fresh = make_transaction("2025-01-02", "Coffee", "-10")
        keys = [fingerprint(stored)]

        assert filter_new([stored, fresh], keys) == [fresh]
        assert filter_new([stored, fresh], tuple(keys)) == [fresh]

    def test_first_occurrence_in_batch_wins(self):
        """Test that repeats inside one batch keep only the first."""
        first = make_transaction(description="Taxi")
        repeat = make_transaction(description="TAXI")
        other = make_transaction(description="Bus")

        assert filter_new([first, repeat, other], set()) == [first, other]

    def test_order_preserved(self):
        """Test that accepted transactions keep their input order."""
        candidates = [make_transaction(description=str(i)) for i in range(5)]

        assert filter_new(candidates, []) == candidates

    def test_idempotent(self):
        """Test that filtering an accepted batch again changes nothing."""
        candidates = [make_transaction(description=d) for d in ("a", "b", "a")]

        once = filter_new(candidates, [])

        assert filter_new(once, []) == once
        assert filter_new(candidates, once) == []

    def test_does_not_modify_existing_set(self):
        """Test that the caller's fingerprint set is left untouched."""
        existing = set()

        filter_new([make_transaction()], existing)

        assert existing == set()
