"""Tests for the transactions resource: transactions + split subtransactions."""

from __future__ import annotations

from datetime import date

import pytest

from ynab_source.schemas.base import ValidationError
from ynab_source.schemas.transactions import RESOURCE, SUBTRANSACTIONS, TRANSACTIONS
from tests.payloads import (
    BUDGET_ID,
    subtransaction,
    transaction,
    transactions_response,
    uid,
)

ACCOUNT_ID = uid(1)


@pytest.fixture
def payload():
    split_id = uid(40)
    return transactions_response(
        transaction(uid(31), ACCOUNT_ID, amount=1500, payee_name="Employer",
                    memo="Paycheck", flag_color="green"),
        transaction(split_id, ACCOUNT_ID, amount=-10000, subtransactions=[
            subtransaction(uid(41), split_id, amount=-7500, category_id=uid(11)),
            subtransaction(uid(42), split_id, amount=-2500, category_id=uid(12)),
        ]),
        transaction(f"{uid(50)}_2024-03-20", ACCOUNT_ID, date="2024-03-20"),
    )


class TestTransactionTransform:
    def test_collections(self, payload):
        assert list(RESOURCE.parse(payload, BUDGET_ID)) == ["transactions", "subtransactions"]

    def test_transaction_row(self, payload):
        row = RESOURCE.parse(payload, BUDGET_ID)["transactions"][0]
        assert row["id"] == uid(31)
        assert row["budgetId"] == BUDGET_ID
        assert row["date"] == date(2024, 3, 5)
        assert row["amount"] == 1.5
        assert row["memo"] == "Paycheck"
        assert row["flag_color"] == "green"
        assert row["account_id"] == ACCOUNT_ID

    def test_transactions_have_no_subtransactions(self, payload):
        for row in RESOURCE.parse(payload, BUDGET_ID)["transactions"]:
            assert "subtransactions" not in row

    def test_subtransactions_flattened(self, payload):
        subs = RESOURCE.parse(payload, BUDGET_ID)["subtransactions"]
        assert [s["id"] for s in subs] == [uid(41), uid(42)]
        assert [s["amount"] for s in subs] == [-7.5, -2.5]
        assert {s["transaction_id"] for s in subs} == {uid(40)}

    def test_subtransaction_count_is_sum_of_nested(self, payload):
        subs = RESOURCE.parse(payload, BUDGET_ID)["subtransactions"]
        expected = sum(len(t["subtransactions"]) for t in payload["data"]["transactions"])
        assert len(subs) == expected

    def test_subtransactions_stamped_with_budget_id(self, payload):
        subs = RESOURCE.parse(payload, BUDGET_ID)["subtransactions"]
        assert {s["budgetId"] for s in subs} == {BUDGET_ID}

    def test_scheduled_instance_id_accepted(self, payload):
        rows = RESOURCE.parse(payload, BUDGET_ID)["transactions"]
        assert rows[2]["id"] == f"{uid(50)}_2024-03-20"
        assert rows[2]["date"] == date(2024, 3, 20)

    def test_rows_match_manifest(self, payload):
        result = RESOURCE.parse(payload, BUDGET_ID)
        for row in result["transactions"]:
            assert list(row) == TRANSACTIONS.column_names
        for row in result["subtransactions"]:
            assert list(row) == SUBTRANSACTIONS.column_names

    def test_idempotent(self, payload):
        validated = RESOURCE.validate(payload)
        assert RESOURCE.transform(validated, BUDGET_ID) == RESOURCE.transform(validated, BUDGET_ID)


class TestTransactionValidation:
    def test_missing_date(self, payload):
        del payload["data"]["transactions"][1]["date"]
        with pytest.raises(ValidationError) as exc_info:
            RESOURCE.parse(payload, BUDGET_ID)
        assert exc_info.value.path == "data.transactions[1].date"

    def test_malformed_account_id(self, payload):
        payload["data"]["transactions"][0]["account_id"] = "checking"
        with pytest.raises(ValidationError, match=r"transactions\[0\]\.account_id: .*invalid UUID"):
            RESOURCE.parse(payload, BUDGET_ID)

    def test_bad_subtransaction_amount(self, payload):
        payload["data"]["transactions"][1]["subtransactions"][0]["amount"] = None
        with pytest.raises(ValidationError, match=r"subtransactions\[0\]\.amount"):
            RESOURCE.parse(payload, BUDGET_ID)

    def test_approved_must_be_bool(self, payload):
        payload["data"]["transactions"][0]["approved"] = "true"
        with pytest.raises(ValidationError, match="approved"):
            RESOURCE.parse(payload, BUDGET_ID)
