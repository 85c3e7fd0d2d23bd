from __future__ import annotations

from dataclasses import dataclass

from ipro.config import Settings
from ipro.repositories.memory_repo import InMemoryRepository
from ipro.services.analytics_service import AnalyticsService
from ipro.services.cashflow_service import CashflowService, summarize
from ipro.services.excel_service import ExcelService
from ipro.services.pricing_service import OrderDraft
from ipro.services.reporting_service import ReportingService
from ipro.services.search_service import SearchService
from ipro.services.stock_service import StockService


@dataclass(frozen=True)
class AppContainer:
    repo: InMemoryRepository
    settings: Settings
    stock: StockService
    cashflow: CashflowService
    search: SearchService
    analytics: AnalyticsService
    excel: ExcelService
    reporting: ReportingService

    def new_order(self, customer: str = "") -> OrderDraft:
        return OrderDraft(customer, config=self.settings.pricing)


def build_container(settings: Settings | None = None, repo: InMemoryRepository | None = None) -> AppContainer:
    settings = settings or Settings()
    repo = repo or InMemoryRepository()

    stock = StockService(repo)
    cashflow = CashflowService(repo)
    search = SearchService()
    analytics = AnalyticsService()
    excel = ExcelService(stock, cashflow)
    reporting = ReportingService(stock, summarize, currency=settings.currency)

    return AppContainer(
        repo=repo,
        settings=settings,
        stock=stock,
        cashflow=cashflow,
        search=search,
        analytics=analytics,
        excel=excel,
        reporting=reporting,
    )
