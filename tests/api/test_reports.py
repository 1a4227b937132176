"""
Tests for report and financial year endpoints.
"""


class TestStatements:

    def test_trial_balance(self, client, payroll_month):
        response = client.get("/reports/trial-balance")
        assert response.status_code == 200

        data = response.json()
        assert data["is_balanced"] is True
        assert data["total_debit"] == "13000.00"
        assert data["group_totals"]["Expenses"]["debit"] == "6800.00"

    def test_trial_balance_as_of(self, client, payroll_month):
        data = client.get(
            "/reports/trial-balance", params={"as_of": "2024-04-05"}
        ).json()
        assert data["total_debit"] == "12000.00"

    def test_profit_loss(self, client, payroll_month):
        data = client.get("/reports/profit-loss").json()
        assert data["net_result"] == "-4800.00"
        assert data["is_profit"] is False

    def test_profit_loss_inverted_range_returns_400(self, client):
        response = client.get("/reports/profit-loss", params={
            "from_date": "2024-05-01", "to_date": "2024-04-01",
        })
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_date_range"

    def test_balance_sheet(self, client, payroll_month):
        data = client.get("/reports/balance-sheet").json()
        assert data["is_balanced"] is True
        assert data["total_assets"] == "6200.00"
        assert data["total_liabilities_and_capital"] == "6200.00"


class TestLedgerAndBooks:

    def test_account_ledger(self, client, chart, payroll_month):
        response = client.get(f"/reports/ledger/{chart['CASH']}")
        assert response.status_code == 200

        data = response.json()
        assert data["account_code"] == "CASH"
        assert len(data["entries"]) == 2
        assert data["closing_balance"] == "1200.00"
        assert data["closing_side"] == "Dr"

    def test_account_ledger_unknown_returns_404(self, client):
        assert client.get("/reports/ledger/999").status_code == 404

    def test_day_book(self, client, payroll_month):
        data = client.get("/reports/day-book", params={
            "from_date": "2024-04-30", "to_date": "2024-04-30",
        }).json()
        assert data["total_vouchers"] == 2

    def test_journal_book(self, client, payroll_month):
        data = client.get("/reports/journal-book").json()
        assert [v["voucher_number"] for v in data["vouchers"]] == ["JV-000001"]

    def test_cash_and_bank_books(self, client, payroll_month):
        cash = client.get("/reports/cash-book").json()
        assert cash["closing_balance"] == "1200.00"

        bank = client.get("/reports/bank-book").json()
        assert bank["total_receipts"] == "10000.00"
        assert bank["total_payments"] == "5000.00"

    def test_stats(self, client, payroll_month):
        data = client.get("/reports/stats").json()
        assert data["total_transactions"] == 10
        assert data["accuracy_rate"] == 100


class TestFinancialYears:

    def _create(self, client, code="2024-25", start="2024-04-01", end="2025-03-31"):
        return client.post("/financial-years", json={
            "year_code": code,
            "start_date": start,
            "end_date": end,
            "created_by": "admin",
        })

    def test_create_and_list(self, client):
        response = self._create(client)
        assert response.status_code == 201
        assert response.json()["is_active"] is True

        years = client.get("/financial-years").json()
        assert [y["year_code"] for y in years] == ["2024-25"]

    def test_overlap_returns_400(self, client):
        self._create(client)
        response = self._create(client, code="X", start="2024-06-01", end="2024-12-31")
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "financial_year"

    def test_close_blocks_postings(self, client, chart):
        year_id = self._create(client).json()["id"]
        response = client.post(f"/financial-years/{year_id}/close")
        assert response.json()["is_closed"] is True

        response = client.post("/vouchers", json={
            "voucher_type": "Receipt",
            "date": "2024-06-01",
            "created_by": "clerk",
            "lines": [
                {"account_id": chart["CASH"], "debit": "10"},
                {"account_id": chart["FEES"], "credit": "10"},
            ],
        })
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "closed_period"

        response = client.post(f"/financial-years/{year_id}/reopen")
        assert response.json()["is_closed"] is False

    def test_activate(self, client):
        first = self._create(client).json()["id"]
        self._create(client, code="2025-26", start="2025-04-01", end="2026-03-31")

        response = client.post(f"/financial-years/{first}/activate")
        assert response.status_code == 200
        assert response.json()["is_active"] is True

    def test_delete(self, client):
        year_id = self._create(client).json()["id"]
        assert client.delete(f"/financial-years/{year_id}").status_code == 204
        assert client.get(f"/financial-years/{year_id}").status_code == 404
