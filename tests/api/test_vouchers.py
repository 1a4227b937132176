"""
Tests for voucher endpoints.
"""


def receipt(chart, amount="500", day="2024-06-01", **extra):
    return {
        "voucher_type": "Receipt",
        "date": day,
        "created_by": "clerk",
        "narration": "Fees received",
        "lines": [
            {"account_id": chart["CASH"], "debit": amount},
            {"account_id": chart["FEES"], "credit": amount},
        ],
        **extra,
    }


class TestPostVoucher:

    def test_post_returns_201(self, client, chart):
        response = client.post("/vouchers", json=receipt(chart))
        assert response.status_code == 201

        data = response.json()
        assert data["voucher_number"] == "RV-000001"
        assert data["voucher_type"] == "Receipt"
        assert data["financial_year"] == "2024-25"
        assert data["total_debit"] == "500.00"
        assert [line["account_code"] for line in data["lines"]] == ["CASH", "FEES"]

    def test_post_updates_balances(self, client, chart):
        client.post("/vouchers", json=receipt(chart))

        cash = client.get(f"/accounts/{chart['CASH']}").json()
        assert cash["current_balance"] == "500.00"
        assert cash["current_balance_side"] == "Dr"

    def test_unbalanced_returns_400_with_difference(self, client, chart):
        body = receipt(chart)
        body["lines"][1]["credit"] = "499.99"

        response = client.post("/vouchers", json=body)
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "unbalanced"
        assert detail["difference"] == "0.01"

        assert client.get("/vouchers").json()["total"] == 0

    def test_unknown_account_returns_400(self, client, chart):
        body = receipt(chart)
        body["lines"][0]["account_id"] = 9999

        response = client.post("/vouchers", json=body)
        assert response.status_code == 400
        assert response.json()["detail"]["account_ids"] == [9999]

    def test_single_line_returns_400(self, client, chart):
        body = receipt(chart)
        body["lines"] = body["lines"][:1]

        response = client.post("/vouchers", json=body)
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "insufficient_lines"

    def test_negative_amount_returns_422(self, client, chart):
        response = client.post("/vouchers", json=receipt(chart, amount="-5"))
        assert response.status_code == 422


class TestCheckVoucher:

    def test_check_writes_nothing(self, client, chart):
        response = client.post("/vouchers/check", json=receipt(chart))
        assert response.status_code == 200
        assert response.json()["is_valid"] is True
        assert client.get("/vouchers").json()["total"] == 0

    def test_check_reports_error(self, client, chart):
        body = receipt(chart)
        body["lines"][0]["credit"] = "500"

        data = client.post("/vouchers/check", json=body).json()
        assert data["is_valid"] is False
        assert data["error"] == "malformed_line"


class TestListAndGet:

    def test_list_and_get(self, client, chart):
        first = client.post("/vouchers", json=receipt(chart, day="2024-06-01")).json()
        client.post("/vouchers", json=receipt(chart, day="2024-06-02"))

        page = client.get("/vouchers", params={"limit": 1}).json()
        assert page["total"] == 2
        assert page["total_pages"] == 2
        assert page["vouchers"][0]["date"] == "2024-06-02"

        response = client.get(f"/vouchers/{first['id']}")
        assert response.status_code == 200
        assert response.json()["voucher_number"] == "RV-000001"

    def test_filter_by_type(self, client, chart):
        client.post("/vouchers", json=receipt(chart))
        page = client.get("/vouchers", params={"voucher_type": "Payment"}).json()
        assert page["total"] == 0

    def test_unknown_voucher_returns_404(self, client):
        assert client.get("/vouchers/999").status_code == 404


class TestReverse:

    def test_reverse_returns_201(self, client, chart):
        original = client.post("/vouchers", json=receipt(chart)).json()

        response = client.post(
            f"/vouchers/{original['id']}/reverse",
            json={"created_by": "auditor", "reversal_date": "2024-06-05"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["reversal_of_id"] == original["id"]
        assert data["reference_number"] == "RV-000001"
        assert data["lines"][0]["credit"] == "500.00"

        cash = client.get(f"/accounts/{chart['CASH']}").json()
        assert cash["current_balance"] == "0.00"

    def test_second_reversal_returns_400(self, client, chart):
        original = client.post("/vouchers", json=receipt(chart)).json()
        url = f"/vouchers/{original['id']}/reverse"
        client.post(url, json={"created_by": "auditor"})

        response = client.post(url, json={"created_by": "auditor"})
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "already_reversed"

    def test_reverse_unknown_returns_404(self, client):
        response = client.post("/vouchers/999/reverse", json={"created_by": "auditor"})
        assert response.status_code == 404
