"""
Unit Tests - Report Registry
"""
import pytest

from sales_dwh.analytics import REPORTS, UnknownReportError, list_reports, run_report
from sales_dwh.config import AnalyticsSettings


class TestReportRegistry:
    """Tests for running reports by name"""

    def test_all_reports_registered(self):
        """Test the full catalogue of report names"""
        names = {info["name"] for info in list_reports()}

        assert names == {
            "business_summary",
            "monthly_trend",
            "yearly_comparison",
            "cumulative_revenue",
            "top_products",
            "bottom_products",
            "category_revenue",
            "category_share",
            "top_customers",
            "revenue_by_country",
            "customer_segments",
            "segment_distribution",
            "product_rank_in_category",
            "customer_report",
            "product_report",
        }

    @pytest.mark.parametrize("name", sorted(REPORTS))
    def test_every_report_runs_on_empty_tables(self, name, empty_tables, evaluation_date):
        """Test that no report fails on an empty warehouse"""
        result = run_report(name, empty_tables, as_of=evaluation_date)

        expected_rows = 1 if name == "business_summary" else 0
        assert result.height == expected_rows

    def test_unknown_report(self, sample_tables):
        with pytest.raises(UnknownReportError):
            run_report("does_not_exist", sample_tables)

    def test_limit_passed_through(self, sample_tables):
        assert run_report("top_products", sample_tables, n=1).height == 1

    def test_unsupported_params_ignored(self, sample_tables, evaluation_date):
        """Test that parameters a report does not take are dropped"""
        result = run_report("monthly_trend", sample_tables, n=1, as_of=evaluation_date)
        assert result.height == 5

    def test_customer_report_requires_evaluation_date(self, sample_tables):
        with pytest.raises(ValueError):
            run_report("customer_report", sample_tables)

    def test_settings_passed_through(self, sample_tables):
        settings = AnalyticsSettings(top_n=2)
        assert run_report("top_customers", sample_tables, settings=settings).height == 2

    def test_product_report_ignores_evaluation_date(self, sample_tables, evaluation_date):
        """Test that product figures are independent of the evaluation date"""
        assert "as_of" not in REPORTS["product_report"].parameters

        pinned = run_report("product_report", sample_tables, as_of=evaluation_date)
        assert pinned.equals(run_report("product_report", sample_tables))
