"""
Score fraction -> risk label.

Two bucket schemes exist on purpose: the dashboard and admin lists use three
levels, the final report uses four. Keep them separate so tuning one does not
change labels shown by the other.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RiskLevel:
    code: str
    label: str
    color: str

    def as_dict(self) -> dict:
        return {"code": self.code, "label": self.label, "color": self.color}


LOW = RiskLevel("low", "Low", "#16a34a")
MEDIUM = RiskLevel("medium", "Medium", "#f59e0b")
HIGH = RiskLevel("high", "High", "#dc2626")
VERY_HIGH = RiskLevel("very_high", "Very High", "#7f1d1d")

REPORT_MESSAGES = {
    LOW.code: "Your facility shows good biosecurity practices. Keep monitoring and maintaining these standards.",
    MEDIUM.code: "Your facility has some biosecurity gaps. Review the recommendations below to reduce risk.",
    HIGH.code: "Your facility has significant biosecurity risks. Prioritise the recommended measures.",
    VERY_HIGH.code: "Your facility is at very high biosecurity risk. Urgent action is recommended.",
}


def dashboard_risk_level(fraction: float) -> RiskLevel:
    """Three-level scheme: <=0.3 low, <=0.6 medium, above that high."""
    if fraction <= 0.3:
        return LOW
    if fraction <= 0.6:
        return MEDIUM
    return HIGH


def report_risk_level(fraction: float) -> RiskLevel:
    """Four-level scheme used on the evaluation report."""
    if fraction <= 0.25:
        return LOW
    if fraction <= 0.50:
        return MEDIUM
    if fraction <= 0.75:
        return HIGH
    return VERY_HIGH


def report_risk_message(fraction: float) -> str:
    return REPORT_MESSAGES[report_risk_level(fraction).code]


def _js_number(value: float) -> str:
    # Browsers print 255.0 as "255".
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def score_gradient(percentage: float) -> str:
    """Progress-bar colour: green at 0%, red at 100%."""
    green = max(0, 255 - percentage * 2.55)
    red = min(255, percentage * 2.55)
    return f"rgb({_js_number(red)}, {_js_number(green)}, 0)"
