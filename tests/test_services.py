from datetime import date

import pytest

from invoice_desk.core.models.invoice import InvoiceStatus, PaymentMethod
from invoice_desk.core.models.line_item import DiscountKind, DiscountPolicy, LineItem
from invoice_desk.core.models.party import Branding, PartyKind, PartySnapshot
from invoice_desk.core.models.preferences import Preferences
from invoice_desk.core.services import InvoiceRepository, JsonStore, SettingsRepository
from invoice_desk.core.services.invoice_form import (
    default_due_date,
    discount_from_form,
    error_lines,
    items_from_rows,
    parse_form_date,
    preview_number,
    validate_draft,
)
from invoice_desk.core.services.invoices import period_start
from invoice_desk.core.services.settings import preferences_from_form
from invoice_desk.exceptions import CustomerNotFoundError, InvoiceNotFoundError, StorageError, ValidationError


# --- invoices: create ---


def test_invoices_are_numbered_sequentially(repos, make_draft):
    invoices, _customers, settings = repos

    first = invoices.get_invoice(invoices.create_invoice(make_draft()))
    second = invoices.get_invoice(invoices.create_invoice(make_draft()))

    assert (first.number, second.number) == ("INV-0001", "INV-0002")
    assert settings.fetch_preferences().next_number == 3


def test_numbering_follows_preferences(repos, make_draft):
    invoices, _customers, settings = repos
    settings.save_preferences(Preferences(number_prefix="AC", number_padding=6, next_number=42))

    doc = invoices.get_invoice(invoices.create_invoice(make_draft()))

    assert doc.number == "AC-000042"


def test_create_captures_snapshots_and_amount_due(repos, make_draft, client_party):
    invoices, _customers, _settings = repos

    doc = invoices.get_invoice(invoices.create_invoice(make_draft()))

    assert doc.sender.company_name == "Acme Ltd"
    assert doc.sender.bank_account == "000123456"
    assert doc.bill_to == client_party
    assert doc.status is InvoiceStatus.UNPAID
    assert doc.amount_paid == 0
    assert doc.amount_due == pytest.approx(110)
    assert doc.created_at


def test_create_without_profile_leaves_sender_empty(tmp_path, make_draft):
    invoices = InvoiceRepository(tmp_path)

    doc = invoices.get_invoice(invoices.create_invoice(make_draft()))

    assert doc.sender is None


def test_negative_total_creates_zero_amount_due(repos, make_draft):
    invoices, _customers, _settings = repos
    draft = make_draft(discount=DiscountPolicy(DiscountKind.ABSOLUTE, 500))

    doc = invoices.get_invoice(invoices.create_invoice(draft))

    assert doc.amount_due == 0


def test_bill_to_snapshot_survives_customer_edit(repos, make_draft):
    invoices, customers, _settings = repos
    customer = customers.add_customer(
        PartySnapshot(kind=PartyKind.COMPANY, company_name="Globex", email="ap@globex.test")
    )

    invoice_id = invoices.create_invoice(make_draft(customer_id=customer.id, client=None))
    customers.update_customer(customer.id, company_name="Globex International", email="new@globex.test")

    doc = invoices.get_invoice(invoice_id)
    assert doc.bill_to.company_name == "Globex"
    assert doc.bill_to.email == "ap@globex.test"
    assert doc.customer_id == customer.id


def test_create_with_unknown_customer_raises(repos, make_draft):
    invoices, _customers, _settings = repos
    with pytest.raises(CustomerNotFoundError):
        invoices.create_invoice(make_draft(customer_id="missing", client=None))


def test_invalid_draft_is_rejected_without_using_a_number(repos, make_draft):
    invoices, _customers, settings = repos

    with pytest.raises(ValidationError):
        invoices.create_invoice(make_draft(items=[]))

    assert settings.fetch_preferences().next_number == 1
    assert invoices.list_invoices()[1] == 0


# --- invoices: listing ---


@pytest.fixture
def seeded(repos, make_draft, client_party):
    invoices, _customers, _settings = repos
    company = client_party.updated(kind=PartyKind.COMPANY, company_name="Initech")
    ids = {
        "old": invoices.create_invoice(make_draft(issue_date=date(2023, 12, 1))),
        "jan": invoices.create_invoice(make_draft(issue_date=date(2024, 1, 10), client=company)),
        "mar": invoices.create_invoice(make_draft(issue_date=date(2024, 3, 2))),
    }
    invoices.mark_invoice_paid(ids["jan"])
    return invoices, ids


def test_list_defaults_to_newest_issue_date_first(seeded):
    invoices, _ids = seeded

    rows, total = invoices.list_invoices()

    assert total == 3
    assert [row.number for row in rows] == ["INV-0003", "INV-0002", "INV-0001"]
    assert rows[0].client_name == "Jane Client"
    assert rows[0].total == pytest.approx(110)


def test_list_filters_by_status(seeded):
    invoices, ids = seeded

    paid, paid_total = invoices.list_invoices(status="paid")
    unpaid, unpaid_total = invoices.list_invoices(status="unpaid")

    assert [row.id for row in paid] == [ids["jan"]]
    assert (paid_total, unpaid_total) == (1, 2)


def test_list_searches_number_and_client(seeded):
    invoices, ids = seeded

    assert [row.id for row in invoices.list_invoices(search="initech")[0]] == [ids["jan"]]
    assert [row.id for row in invoices.list_invoices(search="inv-0003")[0]] == [ids["mar"]]
    assert invoices.list_invoices(search="nobody")[1] == 0


@pytest.mark.parametrize(
    "period, expected",
    [("all", 3), ("year", 2), ("quarter", 2), ("month", 1)],
)
def test_list_filters_by_period(seeded, period, expected):
    invoices, _ids = seeded
    assert invoices.list_invoices(period=period, today=date(2024, 3, 20))[1] == expected


def test_list_sorts_and_pages(seeded):
    invoices, _ids = seeded

    page_one, total = invoices.list_invoices(sort_by="number", sort="asc", page_size=2)
    page_two, _ = invoices.list_invoices(sort_by="number", sort="asc", page_size=2, page=2)

    assert total == 3
    assert [row.number for row in page_one] == ["INV-0001", "INV-0002"]
    assert [row.number for row in page_two] == ["INV-0003"]


def test_list_rejects_unknown_sort_and_period(repos):
    invoices, _customers, _settings = repos

    with pytest.raises(ValidationError) as excinfo:
        invoices.list_invoices(sort_by="amount")
    assert "sort_by" in excinfo.value.field_errors

    with pytest.raises(ValidationError):
        invoices.list_invoices(period="decade")


def test_period_start_boundaries():
    today = date(2024, 2, 14)

    assert period_start("month", today) == date(2024, 2, 1)
    assert period_start("quarter", today) == date(2023, 12, 1)
    assert period_start("year", today) == date(2024, 1, 1)
    assert period_start("all", today) is None


# --- invoices: payments ---


def test_partial_payment_keeps_invoice_unpaid(repos, make_draft):
    invoices, _customers, _settings = repos
    invoice_id = invoices.create_invoice(make_draft())

    doc = invoices.update_invoice_payment(invoice_id, PaymentMethod.CASH, 40)

    assert doc.status is InvoiceStatus.UNPAID
    assert doc.amount_paid == 40
    assert doc.amount_due == pytest.approx(70)
    assert doc.payment_method is PaymentMethod.CASH
    assert invoices.get_invoice(invoice_id) == doc


def test_full_payment_marks_invoice_paid(repos, make_draft):
    invoices, _customers, _settings = repos
    invoice_id = invoices.create_invoice(make_draft())

    doc = invoices.update_invoice_payment(invoice_id, "Card Payment", 110)

    assert doc.status is InvoiceStatus.PAID
    assert doc.amount_due == 0
    assert doc.payment_method is PaymentMethod.CARD


def test_lowering_payment_reopens_invoice(repos, make_draft):
    invoices, _customers, _settings = repos
    invoice_id = invoices.create_invoice(make_draft())
    invoices.update_invoice_payment(invoice_id, PaymentMethod.CASH, 110)

    doc = invoices.update_invoice_payment(invoice_id, PaymentMethod.CASH, 10)

    assert doc.status is InvoiceStatus.UNPAID
    assert doc.amount_due == pytest.approx(100)


@pytest.mark.parametrize("amount", [-1, 110.01, "abc"])
def test_invalid_payment_amounts_are_rejected(repos, make_draft, amount):
    invoices, _customers, _settings = repos
    invoice_id = invoices.create_invoice(make_draft())

    with pytest.raises(ValidationError) as excinfo:
        invoices.update_invoice_payment(invoice_id, PaymentMethod.CASH, amount)

    assert "amount_paid" in excinfo.value.field_errors
    assert invoices.get_invoice(invoice_id).amount_paid == 0


def test_mark_paid_settles_the_balance(repos, make_draft):
    invoices, _customers, _settings = repos
    invoice_id = invoices.create_invoice(make_draft())

    doc = invoices.mark_invoice_paid(invoice_id)

    assert doc.is_paid
    assert doc.amount_paid == pytest.approx(110)
    assert doc.amount_due == 0


def test_invoice_created_as_paid_is_settled(repos, make_draft):
    invoices, _customers, _settings = repos

    doc = invoices.get_invoice(invoices.create_invoice(make_draft(status=InvoiceStatus.PAID)))

    assert doc.is_paid
    assert doc.amount_paid == pytest.approx(110)
    assert doc.amount_due == 0


@pytest.fixture
def gadget_invoice(repos, make_draft):
    # 19.99 + 15% tax = 22.9885, shown as 22.99
    invoices, _customers, _settings = repos
    items = [LineItem("Gadget", quantity=1, unit_price=19.99, tax_percent=15)]
    return invoices, invoices.create_invoice(make_draft(items=items))


def test_created_amount_due_is_in_cents(gadget_invoice):
    invoices, invoice_id = gadget_invoice

    assert invoices.get_invoice(invoice_id).amount_due == 22.99


def test_paying_the_displayed_total_settles_the_invoice(gadget_invoice):
    invoices, invoice_id = gadget_invoice

    doc = invoices.update_invoice_payment(invoice_id, PaymentMethod.CASH, 22.99)

    assert doc.status is InvoiceStatus.PAID
    assert doc.amount_paid == 22.99
    assert doc.amount_due == 0


def test_one_cent_short_stays_unpaid(gadget_invoice):
    invoices, invoice_id = gadget_invoice

    doc = invoices.update_invoice_payment(invoice_id, PaymentMethod.CASH, 22.98)

    assert doc.status is InvoiceStatus.UNPAID
    assert doc.amount_due == pytest.approx(0.01)


def test_overpaying_the_displayed_total_is_rejected(gadget_invoice):
    invoices, invoice_id = gadget_invoice

    with pytest.raises(ValidationError):
        invoices.update_invoice_payment(invoice_id, PaymentMethod.CASH, 23.00)


def test_unknown_invoice_ids(repos):
    invoices, _customers, _settings = repos

    assert invoices.get_invoice("nope") is None
    with pytest.raises(InvoiceNotFoundError):
        invoices.mark_invoice_paid("nope")
    with pytest.raises(InvoiceNotFoundError):
        invoices.update_invoice_payment("nope", PaymentMethod.CASH, 1)
    with pytest.raises(InvoiceNotFoundError):
        invoices.delete_invoice("nope")


def test_delete_invoice(repos, make_draft):
    invoices, _customers, _settings = repos
    keep = invoices.create_invoice(make_draft())
    drop = invoices.create_invoice(make_draft())

    invoices.delete_invoice(drop)

    assert invoices.get_invoice(drop) is None
    assert invoices.get_invoice(keep) is not None


# --- invoice form ---


def test_validate_draft_reports_every_field(make_draft):
    draft = make_draft(client=PartySnapshot(), items=[LineItem("", quantity=0, unit_price=-5)])

    with pytest.raises(ValidationError) as excinfo:
        validate_draft(draft)

    assert set(excinfo.value.field_errors) == {
        "full_name",
        "email",
        "phone",
        "street",
        "city",
        "postal",
        "country",
        "item_1",
        "qty_1",
        "price_1",
    }


def test_company_client_needs_company_name(make_draft, client_party):
    client = client_party.updated(kind=PartyKind.COMPANY)

    with pytest.raises(ValidationError) as excinfo:
        validate_draft(make_draft(client=client))

    assert set(excinfo.value.field_errors) == {"company_name"}


def test_roster_customer_skips_client_checks(make_draft):
    validate_draft(make_draft(customer_id="c1", client=None))


def test_item_errors_are_one_based(make_draft):
    items = [LineItem("Ok", quantity=1, unit_price=1), LineItem("Bad", quantity=-2, unit_price=1)]

    with pytest.raises(ValidationError) as excinfo:
        validate_draft(make_draft(items=items))

    assert set(excinfo.value.field_errors) == {"qty_2"}


def test_form_defaults():
    assert default_due_date(date(2024, 1, 25), 14) == date(2024, 2, 8)
    assert default_due_date(date(2024, 1, 25), -3) == date(2024, 1, 25)
    assert preview_number(Preferences(next_number=12)) == "INV-0012"


def test_form_dates_are_iso():
    assert parse_form_date(" 2024-02-29 ", "issue_date") == date(2024, 2, 29)

    with pytest.raises(ValidationError) as excinfo:
        parse_form_date("29/02/2024", "due_date")
    assert set(excinfo.value.field_errors) == {"due_date"}


def test_item_rows_skip_blank_rows():
    rows = [
        {"item": "Design", "description": "Logo", "qty": "2", "price": "150,50", "tax": ""},
        {"item": "", "description": "", "qty": "", "price": "", "tax": ""},
        {"item": "Hosting", "description": "", "qty": "1", "price": "20", "tax": "15"},
    ]

    items = items_from_rows(rows)

    assert items == [
        LineItem("Design", "Logo", quantity=2, unit_price=150.5, tax_percent=0),
        LineItem("Hosting", "", quantity=1, unit_price=20, tax_percent=15),
    ]


def test_item_rows_report_non_numbers_by_position():
    rows = [
        {"item": "Ok", "qty": "1", "price": "1"},
        {"item": "", "qty": "", "price": ""},
        {"item": "Bad", "qty": "two", "price": "", "tax": "x"},
    ]

    with pytest.raises(ValidationError) as excinfo:
        items_from_rows(rows)

    assert set(excinfo.value.field_errors) == {"qty_2", "price_2", "tax_2"}
    assert error_lines(excinfo.value.field_errors)[0] == "Item 2: Quantity must be a number."


def test_discount_from_form():
    assert discount_from_form("percent", "10") == DiscountPolicy(DiscountKind.PERCENT_OF_SUBTOTAL, 10)
    assert discount_from_form("value", "") == DiscountPolicy(DiscountKind.ABSOLUTE, 0)

    for bad in ("-5", "lots"):
        with pytest.raises(ValidationError) as excinfo:
            discount_from_form("value", bad)
        assert set(excinfo.value.field_errors) == {"discount"}


def test_form_rows_feed_a_valid_draft(repos, make_draft):
    invoices, _customers, _settings = repos
    items = items_from_rows([{"item": "Gadget", "qty": "1", "price": "19.99", "tax": "15"}])
    draft = make_draft(items=items, discount=discount_from_form("value", "0.50"))

    doc = invoices.get_invoice(invoices.create_invoice(draft))

    assert doc.amount_due == 22.49


def test_error_lines_keep_plain_messages():
    assert error_lines({"email": "Email is required.", "item_3": "Item name is required."}) == [
        "Email is required.",
        "Item 3: Item name is required.",
    ]


# --- customers ---


def test_add_customer_normalizes_email(repos):
    _invoices, customers, _settings = repos

    customer = customers.add_customer(PartySnapshot(full_name="Bob", email="  Bob@Example.TEST "))

    assert customer.party.email == "bob@example.test"
    assert customers.get_customer(customer.id).party.email == "bob@example.test"


def test_add_customer_requires_email(repos):
    _invoices, customers, _settings = repos

    with pytest.raises(ValidationError) as excinfo:
        customers.add_customer(PartySnapshot(full_name="No Mail"))

    assert "email" in excinfo.value.field_errors


def test_customer_listing_search_and_active_flag(repos):
    _invoices, customers, _settings = repos
    alice = customers.add_customer(PartySnapshot(full_name="Alice", email="alice@test"))
    bob = customers.add_customer(PartySnapshot(kind=PartyKind.COMPANY, company_name="Bobco", email="bob@test"))
    customers.set_customer_active(alice.id, False)

    active, active_total = customers.list_customers()
    everyone, everyone_total = customers.list_customers(include_inactive=True)

    assert [c.id for c in active] == [bob.id]
    assert active_total == 1
    assert [c.id for c in everyone] == [bob.id, alice.id]
    assert everyone_total == 2
    assert [c.id for c in customers.list_customers(search="ALICE", include_inactive=True)[0]] == [alice.id]


def test_update_customer_rejects_unknown_fields(repos):
    _invoices, customers, _settings = repos
    customer = customers.add_customer(PartySnapshot(full_name="Eve", email="eve@test"))

    with pytest.raises(ValidationError):
        customers.update_customer(customer.id, shoe_size=42)

    updated = customers.update_customer(customer.id, kind="company", company_name="Eve Ltd")
    assert updated.party.kind is PartyKind.COMPANY
    assert updated.party.display_name == "Eve Ltd"


def test_update_customer_keeps_an_email(repos):
    _invoices, customers, _settings = repos
    customer = customers.add_customer(PartySnapshot(full_name="Eve", email="eve@test"))

    with pytest.raises(ValidationError) as excinfo:
        customers.update_customer(customer.id, email="  ")

    assert "email" in excinfo.value.field_errors
    assert customers.get_customer(customer.id).party.email == "eve@test"


def test_delete_customer(repos):
    _invoices, customers, _settings = repos
    customer = customers.add_customer(PartySnapshot(full_name="Tmp", email="tmp@test"))

    customers.delete_customer(customer.id)

    with pytest.raises(CustomerNotFoundError):
        customers.get_customer(customer.id)
    with pytest.raises(CustomerNotFoundError):
        customers.delete_customer(customer.id)


# --- settings and storage ---


def test_settings_sections_are_saved_independently(tmp_path, company_profile):
    settings = SettingsRepository(tmp_path)
    settings.save_profile(company_profile)
    settings.save_preferences(Preferences(currency="EUR"))
    settings.save_branding(Branding(brand_color="#112233"))

    reloaded = SettingsRepository(tmp_path)
    assert reloaded.fetch_profile() == company_profile
    assert reloaded.fetch_preferences().currency == "EUR"
    assert reloaded.fetch_branding().brand_color == "#112233"


def test_preferences_from_form():
    prefs = preferences_from_form(
        {
            "currency": "eur",
            "number_prefix": "ACME",
            "number_padding": "3",
            "next_number": "42",
            "payment_terms": "30",
            "default_notes": " Thanks ",
            "accent_color": "#0F172A",
        }
    )

    assert prefs == Preferences(
        currency="EUR",
        number_prefix="ACME",
        number_padding=3,
        next_number=42,
        payment_terms=30,
        default_notes="Thanks",
        accent_color="#0F172A",
    )
    assert prefs.format_number() == "ACME-042"


def test_preferences_from_form_reports_every_field():
    with pytest.raises(ValidationError) as excinfo:
        preferences_from_form({"number_padding": "-1", "next_number": "0", "payment_terms": "1.5", "accent_color": "blue"})

    assert set(excinfo.value.field_errors) == {
        "currency",
        "number_prefix",
        "number_padding",
        "next_number",
        "payment_terms",
        "accent_color",
    }


def test_missing_settings_give_defaults(tmp_path):
    settings = SettingsRepository(tmp_path)

    assert settings.fetch_profile().kind is PartyKind.COMPANY
    assert settings.fetch_profile().is_empty()
    assert settings.fetch_preferences() == Preferences()
    assert settings.fetch_branding() is None


def test_unreadable_settings_drop_branding_only(tmp_path):
    (tmp_path / "settings.json").write_text("{not json", encoding="utf-8")
    settings = SettingsRepository(tmp_path)

    assert settings.fetch_branding() is None
    with pytest.raises(StorageError):
        settings.fetch_profile()


def test_json_store_round_trip_leaves_no_temp_files(tmp_path):
    store = JsonStore(tmp_path / "nested" / "data.json", default=[])

    assert store.load() == []
    store.save([{"a": 1}])
    store.save([{"a": 2}])

    assert store.load() == [{"a": 2}]
    assert [p.name for p in (tmp_path / "nested").iterdir()] == ["data.json"]


def test_json_store_default_is_not_shared(tmp_path):
    store = JsonStore(tmp_path / "data.json", default={"rows": []})

    store.load()["rows"].append(1)

    assert store.load() == {"rows": []}


def test_json_store_malformed_file_raises(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("[1, 2", encoding="utf-8")

    with pytest.raises(StorageError) as excinfo:
        JsonStore(path).load()

    assert excinfo.value.code == "STORE"
    assert excinfo.value.details["path"] == str(path)
