from college_match.finance.net_price import FinancialSummary, build_financial_summary

__all__ = ["FinancialSummary", "build_financial_summary"]
