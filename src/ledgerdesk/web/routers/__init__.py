from ledgerdesk.web.routers.customers import router as customers_router
from ledgerdesk.web.routers.dashboard import router as dashboard_router
from ledgerdesk.web.routers.invoices import router as invoices_router
from ledgerdesk.web.routers.numbering import router as numbering_router
from ledgerdesk.web.routers.orders import router as orders_router
from ledgerdesk.web.routers.tickets import router as tickets_router
from ledgerdesk.web.routers.totals import router as totals_router
from ledgerdesk.web.routers.worksheets import router as worksheets_router

__all__ = [
    "customers_router",
    "dashboard_router",
    "invoices_router",
    "numbering_router",
    "orders_router",
    "tickets_router",
    "totals_router",
    "worksheets_router",
]
