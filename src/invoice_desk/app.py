import logging

from invoice_desk import config
from invoice_desk.core.services.customers import CustomerRepository
from invoice_desk.core.services.invoices import InvoiceRepository
from invoice_desk.core.services.settings import SettingsRepository


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # keep request logs out of the app log
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def main() -> None:
    setup_logging()
    from invoice_desk.ui.layouts.main_window import MainWindow

    settings = SettingsRepository(config.DATA_DIR)
    customers = CustomerRepository(config.DATA_DIR)
    invoices = InvoiceRepository(config.DATA_DIR, settings=settings, customers=customers)
    logging.getLogger(__name__).info("Using data directory %s", config.DATA_DIR)
    app = MainWindow(invoices, settings, customers)
    app.mainloop()


if __name__ == "__main__":
    main()
