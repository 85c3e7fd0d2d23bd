from .stock_service import StockService
from .cashflow_service import CashflowService
from .pricing_service import OrderDraft, price_order
from .search_service import SearchService
from .analytics_service import AnalyticsService
from .excel_service import ExcelService
from .reporting_service import ReportingService

__all__ = [
    "StockService",
    "CashflowService",
    "OrderDraft",
    "price_order",
    "SearchService",
    "AnalyticsService",
    "ExcelService",
    "ReportingService",
]
