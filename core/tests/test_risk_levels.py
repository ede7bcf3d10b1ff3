"""Risk bucketing and gradient tests."""

from django.test import SimpleTestCase

from core.service.risk_levels import (
    dashboard_risk_level,
    report_risk_level,
    report_risk_message,
    score_gradient,
)


class DashboardRiskLevelTest(SimpleTestCase):
    def test_upper_bounds_are_inclusive(self):
        self.assertEqual(dashboard_risk_level(0.3).label, "Low")
        self.assertEqual(dashboard_risk_level(0.30000001).label, "Medium")
        self.assertEqual(dashboard_risk_level(0.6).label, "Medium")
        self.assertEqual(dashboard_risk_level(0.61).label, "High")
        self.assertEqual(dashboard_risk_level(0).label, "Low")


class ReportRiskLevelTest(SimpleTestCase):
    def test_four_levels(self):
        cases = [
            (0.0, "Low"),
            (0.25, "Low"),
            (0.2501, "Medium"),
            (0.5, "Medium"),
            (0.75, "High"),
            (0.76, "Very High"),
            (1.0, "Very High"),
        ]
        for fraction, label in cases:
            with self.subTest(fraction=fraction):
                self.assertEqual(report_risk_level(fraction).label, label)

    def test_schemes_differ_on_the_same_fraction(self):
        self.assertEqual(dashboard_risk_level(0.28).code, "low")
        self.assertEqual(report_risk_level(0.28).code, "medium")

    def test_message_per_level(self):
        self.assertIn("good biosecurity", report_risk_message(0.1))
        self.assertIn("Urgent", report_risk_message(0.9))


class ScoreGradientTest(SimpleTestCase):
    def test_extremes(self):
        self.assertEqual(score_gradient(0), "rgb(0, 255, 0)")
        self.assertEqual(score_gradient(200), "rgb(255, 0, 0)")

    def test_fractional_components(self):
        red, green, blue = score_gradient(50)[4:-1].split(", ")
        self.assertAlmostEqual(float(red), 127.5)
        self.assertAlmostEqual(float(green), 127.5)
        self.assertEqual(blue, "0")
        self.assertNotIn(".0,", score_gradient(100))
