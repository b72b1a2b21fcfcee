import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure `src` is importable when running tests from repo root.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def company_profile():
    from invoice_desk.core.models.party import PartyKind, PartySnapshot

    return PartySnapshot(
        kind=PartyKind.COMPANY,
        company_name="Acme Ltd",
        email="billing@acme.test",
        phone="+230 5000 0000",
        address_line_1="1 Royal Road",
        address_line_2="Port Louis",
        registration_id="C123",
        vat_number="VAT987",
        bank_name="MCB",
        bank_account="000123456",
        website="acme.test",
    )


@pytest.fixture
def client_party():
    from invoice_desk.core.models.party import PartyKind, PartySnapshot

    return PartySnapshot(
        kind=PartyKind.INDIVIDUAL,
        full_name="Jane Client",
        email="jane@client.test",
        phone="+230 5111 1111",
        street="2 Rue Test",
        city="Curepipe",
        postal="74401",
        country="Mauritius",
    )


@pytest.fixture
def sample_invoice(company_profile, client_party):
    from invoice_desk.core.models.invoice import InvoiceDocument, PaymentMethod
    from invoice_desk.core.models.line_item import DiscountKind, DiscountPolicy, LineItem

    return InvoiceDocument(
        id="abc123",
        number="INV-0007",
        issue_date="2024-03-01",
        due_date="2024-03-15",
        currency="USD",
        sender=company_profile,
        bill_to=client_party,
        items=(
            LineItem("Widget", "Blue, large", quantity=2, unit_price=100, tax_percent=0),
            LineItem("Service", "", quantity=1, unit_price=30, tax_percent=20),
        ),
        discount=DiscountPolicy(DiscountKind.PERCENT_OF_SUBTOTAL, 10),
        notes="Thanks for your business.",
        terms="Payment within 14 days.",
        payment_method=PaymentMethod.CARD,
        amount_paid=50,
        amount_due=163,
    )


@pytest.fixture
def data_dir(tmp_path, company_profile):
    from invoice_desk.core.services.settings import SettingsRepository

    SettingsRepository(tmp_path).save_profile(company_profile)
    return tmp_path


@pytest.fixture
def repos(data_dir):
    from invoice_desk.core.services.customers import CustomerRepository
    from invoice_desk.core.services.invoices import InvoiceRepository
    from invoice_desk.core.services.settings import SettingsRepository

    settings = SettingsRepository(data_dir)
    customers = CustomerRepository(data_dir)
    invoices = InvoiceRepository(data_dir, settings=settings, customers=customers)
    return invoices, customers, settings


@pytest.fixture
def make_draft(client_party):
    from invoice_desk.core.models.line_item import LineItem
    from invoice_desk.core.services.invoices import InvoiceDraft

    def _make(**overrides):
        values = {
            "issue_date": date(2024, 3, 1),
            "due_date": date(2024, 3, 15),
            "items": [LineItem("Widget", quantity=2, unit_price=50, tax_percent=10)],
            "client": client_party,
        }
        values.update(overrides)
        return InvoiceDraft(**values)

    return _make


@pytest.fixture
def png_logo(tmp_path):
    from PIL import Image

    path = tmp_path / "logo.png"
    Image.new("RGBA", (32, 32), (15, 23, 42, 200)).save(path)
    return path
