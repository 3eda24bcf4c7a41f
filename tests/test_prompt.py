"""Tests for analysis prompt construction."""
import unittest
from decimal import Decimal

from budgetwise.llm.prompt import build_analysis_prompt
from financial_fixtures import make_financials


class TestBuildAnalysisPrompt(unittest.TestCase):
    """Test build_analysis_prompt functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.data = make_financials()

    def test_contains_summary_figures(self):
        prompt = build_analysis_prompt(self.data)

        self.assertIn("- Monthly Income: 5000", prompt)
        self.assertIn("- Monthly Expenses: 3200", prompt)
        self.assertIn("- Monthly Savings: 1800", prompt)

    def test_contains_categories_and_trends(self):
        prompt = build_analysis_prompt(self.data)

        self.assertIn("- Food: 450 (35%)", prompt)
        self.assertIn("- Utilities: 350 (27%)", prompt)
        self.assertIn("- Oct: Income 5600, Expenses 3800", prompt)
        self.assertIn("- Dec: Income 5800, Expenses 4500", prompt)

    def test_only_three_recent_transactions(self):
        prompt = build_analysis_prompt(self.data)

        self.assertIn("- Grocery Shopping: -120.5 (Food)", prompt)
        self.assertIn("- Gas Station: -45 (Transportation)", prompt)
        self.assertIn("- Coffee: -4.2 (Food)", prompt)
        self.assertNotIn("Salary", prompt)

    def test_no_goals(self):
        prompt = build_analysis_prompt(self.data)

        self.assertNotIn("User Budget Goal", prompt)
        self.assertIn("Category Budget Goals:\nNone", prompt)

    def test_empty_goal_mapping_renders_none(self):
        prompt = build_analysis_prompt(self.data, category_goals={})

        self.assertIn("Category Budget Goals:\nNone", prompt)

    def test_goals_included(self):
        prompt = build_analysis_prompt(
            self.data,
            target_budget=Decimal("3000.00"),
            category_goals={"Food": Decimal(400), "Entertainment": Decimal("150.50")}
        )

        self.assertIn("User Budget Goal: 3000 (monthly limit)", prompt)
        self.assertIn("Category Budget Goals:\n- Food: 400\n- Entertainment: 150.5", prompt)

    def test_zero_budget_goal_is_omitted(self):
        prompt = build_analysis_prompt(self.data, target_budget=Decimal(0))

        self.assertNotIn("User Budget Goal", prompt)

    def test_schema_and_refusal_instructions(self):
        prompt = build_analysis_prompt(self.data)

        self.assertIn('"overallScore": number', prompt)
        self.assertIn('"priority": "high" | "medium" | "low"', prompt)
        self.assertIn('{"refused": true, "reason": "<brief reason>"}', prompt)

    def test_identical_input_gives_identical_prompt(self):
        goals = {"Food": Decimal(400)}

        first = build_analysis_prompt(self.data, Decimal(3000), goals)
        second = build_analysis_prompt(make_financials(), Decimal(3000), dict(goals))

        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
