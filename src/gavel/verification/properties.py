"""Formal verification of auction and ledger invariants using Z3.

Each check encodes one rule of the engine symbolically and asks the solver
for a counterexample. unsat means the property holds for ALL inputs.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from z3 import (
    And,
    Bool,
    If,
    Implies,
    Not,
    Or,
    Real,
    Solver,
    sat,
    unsat,
)

# Mirrors ANTI_SNIPE_WINDOW in the engine, in seconds.
ANTI_SNIPE_WINDOW_SECONDS = 60


@dataclass
class VerificationResult:
    """Result of a formal verification check."""

    property_name: str
    holds: bool
    counterexample: dict | None = None
    solver_time_ms: float = 0.0
    description: str = ""


class AuctionVerifier:
    """Formally verify properties of the bidding rules and the ledger book.

    Each method attempts to prove a property holds for ALL possible
    inputs. If the property fails, a concrete counterexample is returned.
    """

    def verify_price_monotone(self) -> VerificationResult:
        """Prove: placing a bid never lowers the current price.

        Formalization: with increment >= 0, a bid a against price p is
        accepted iff a >= p + increment; the new price is a if accepted,
        p otherwise. Look for a new price below p.
        """
        solver = Solver()

        price = Real("current_price")
        increment = Real("bid_increment")
        amount = Real("amount")

        solver.add(price >= 0)
        solver.add(increment >= 0)

        accepted = amount >= price + increment
        new_price = If(accepted, amount, price)

        solver.add(new_price < price)
        return self._solve(
            solver,
            "price_monotone",
            "Proved: the current price never decreases.",
        )

    def verify_min_increment(self) -> VerificationResult:
        """Prove: after any two bid attempts, the price has risen by at least
        one increment per accepted bid.

        Formalization: attempts a1, a2 run in turn from starting price p0.
        Each is accepted unless a_i < p_{i-1} + increment (the engine's
        rejection test) or its bidder already leads. Look for a final price
        below p0 + increment * (number accepted).
        """
        solver = Solver()

        p0 = Real("starting_price")
        increment = Real("bid_increment")
        a1 = Real("amount_1")
        a2 = Real("amount_2")
        leads_1 = Bool("bidder_1_leads")
        leads_2 = Bool("bidder_2_leads")

        solver.add(p0 >= 0)
        solver.add(increment >= 0)

        accepted_1 = And(Not(a1 < p0 + increment), Not(leads_1))
        p1 = If(accepted_1, a1, p0)
        accepted_2 = And(Not(a2 < p1 + increment), Not(leads_2))
        p2 = If(accepted_2, a2, p1)

        n_accepted = If(accepted_1, 1, 0) + If(accepted_2, 1, 0)
        solver.add(p2 < p0 + increment * n_accepted)
        return self._solve(
            solver,
            "min_increment",
            "Proved: each accepted bid lifts the price by at least the increment.",
        )

    def verify_reserve_rule(self) -> VerificationResult:
        """Prove: a winner is declared only at or above the reserve, and
        an unsold auction reports a final price of 0."""
        solver = Solver()

        highest = Real("highest_bid")
        reserve = Real("reserve_price")
        has_bids = Bool("has_bids")

        solver.add(highest >= 0)
        solver.add(reserve >= 0)

        has_winner = And(has_bids, highest >= reserve)
        final_price = If(has_winner, highest, 0)

        solver.add(
            Or(
                And(has_winner, final_price < reserve),
                And(Not(has_winner), final_price != 0),
            )
        )
        return self._solve(
            solver,
            "reserve_rule",
            "Proved: no sub-reserve winner; unsold auctions report 0.",
        )

    def verify_extension_exact(self) -> VerificationResult:
        """Prove: an anti-sniping extension moves the end time by exactly the
        configured amount, only inside the window, and never when disabled.

        Times are seconds on a common axis.
        """
        solver = Solver()

        end = Real("end_time")
        now = Real("now")
        extension = Real("time_extension")
        enabled = Bool("extension_enabled")

        solver.add(Implies(enabled, extension > 0))

        in_window = end - now < ANTI_SNIPE_WINDOW_SECONDS
        new_end = If(And(enabled, in_window), end + extension, end)

        solver.add(
            Or(
                And(Not(enabled), new_end != end),
                And(new_end != end, new_end - end != extension),
                And(enabled, Not(in_window), new_end != end),
                new_end < end,
            )
        )
        return self._solve(
            solver,
            "extension_exact",
            "Proved: extensions add exactly time_extension, only for late bids.",
        )

    def verify_sorted_insertion(self) -> VerificationResult:
        """Prove: inserting into a descending book at the position after all
        amounts >= the new one keeps the book descending.

        A three-order book is enough: insertion only compares against
        neighbours.
        """
        solver = Solver()

        b1 = Real("bid_1")
        b2 = Real("bid_2")
        b3 = Real("bid_3")
        x = Real("new_bid")

        solver.add(b1 >= b2, b2 >= b3)

        # Number of resting amounts >= x
        pos = If(x > b1, 0, If(x > b2, 1, If(x > b3, 2, 3)))
        s0 = If(pos == 0, x, b1)
        s1 = If(pos == 0, b1, If(pos == 1, x, b2))
        s2 = If(pos <= 1, b2, If(pos == 2, x, b3))
        s3 = If(pos <= 2, b3, x)

        solver.add(Or(s0 < s1, s1 < s2, s2 < s3))
        return self._solve(
            solver,
            "sorted_insertion",
            "Proved: ledger insertion keeps bids sorted by descending amount.",
        )

    def verify_all(self) -> list[VerificationResult]:
        """Run all verification checks."""
        results = [
            self.verify_price_monotone(),
            self.verify_min_increment(),
            self.verify_reserve_rule(),
            self.verify_extension_exact(),
            self.verify_sorted_insertion(),
        ]
        return results

    @staticmethod
    def _solve(solver: Solver, name: str, proved: str) -> VerificationResult:
        """Check for a counterexample and wrap the outcome."""
        start = time.time()
        result = solver.check()
        elapsed = (time.time() - start) * 1000

        if result == unsat:
            return VerificationResult(
                property_name=name,
                holds=True,
                solver_time_ms=elapsed,
                description=proved,
            )
        elif result == sat:
            model = solver.model()
            return VerificationResult(
                property_name=name,
                holds=False,
                counterexample={str(d): str(model[d]) for d in model.decls()},
                solver_time_ms=elapsed,
                description=f"COUNTEREXAMPLE FOUND: {name} violated.",
            )
        else:
            return VerificationResult(
                property_name=name,
                holds=False,
                solver_time_ms=elapsed,
                description="Solver returned unknown.",
            )
