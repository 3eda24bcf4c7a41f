"""Tests for tips and suggested budget goals."""
import random
import unittest
from decimal import Decimal

from budgetwise.orchestrator.tips import TIPS, generate_budget_goals, get_personalized_tips


class TestTips(unittest.TestCase):
    """Test tip selection and goal suggestions."""

    def test_tips_are_distinct(self):
        tips = get_personalized_tips(rng=random.Random(7))

        self.assertEqual(len(tips), 4)
        self.assertEqual(len(set(tips)), 4)
        self.assertTrue(all(tip in TIPS for tip in tips))

    def test_tip_count_capped(self):
        self.assertEqual(len(get_personalized_tips(count=50)), len(TIPS))

    def test_budget_goals_split(self):
        goals = generate_budget_goals(Decimal(300))

        self.assertEqual([g.target for g in goals], [Decimal("60.00"), Decimal("30.00"), Decimal("10.00")])
        self.assertTrue(all(g.timeframe == "30 days" for g in goals))

    def test_default_savings_target(self):
        for target in [None, Decimal(0)]:
            goals = generate_budget_goals(target)
            self.assertEqual(goals[0].target, Decimal("100.00"))
            self.assertEqual(goals[2].target, Decimal("16.67"))

    def test_large_savings_target(self):
        goals = generate_budget_goals(Decimal("3E+30"))

        self.assertEqual(goals[0].target, Decimal("6E+29"))
        self.assertEqual(goals[2].target, Decimal("1E+29"))


if __name__ == "__main__":
    unittest.main()
