"""Dashboard aggregates and payment summaries."""

from influencerflow.dashboard.stats import DashboardService, payment_stats

__all__ = ["DashboardService", "payment_stats"]
