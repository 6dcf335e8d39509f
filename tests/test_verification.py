"""Tests for Z3 formal verification of auction rules."""

from gavel.verification.properties import AuctionVerifier


class TestVerification:
    def setup_method(self):
        self.verifier = AuctionVerifier()

    def test_price_monotone_holds(self):
        result = self.verifier.verify_price_monotone()
        assert result.holds is True
        assert result.property_name == "price_monotone"

    def test_min_increment_holds(self):
        result = self.verifier.verify_min_increment()
        assert result.holds is True
        assert result.property_name == "min_increment"

    def test_reserve_rule_holds(self):
        result = self.verifier.verify_reserve_rule()
        assert result.holds is True
        assert result.property_name == "reserve_rule"

    def test_extension_exact_holds(self):
        result = self.verifier.verify_extension_exact()
        assert result.holds is True
        assert result.property_name == "extension_exact"

    def test_sorted_insertion_holds(self):
        result = self.verifier.verify_sorted_insertion()
        assert result.holds is True
        assert result.property_name == "sorted_insertion"

    def test_verify_all(self):
        """All results in verify_all() have holds == True."""
        results = self.verifier.verify_all()
        assert len(results) == 5
        for r in results:
            assert r.holds is True, f"Property {r.property_name} failed: {r.description}"
            assert r.counterexample is None

    def test_solver_times_reasonable(self):
        """Solver times should be reasonable (< 5 seconds each)."""
        results = self.verifier.verify_all()
        for r in results:
            assert r.solver_time_ms < 5000, f"{r.property_name} took {r.solver_time_ms}ms"
