"""
Integration tests for product endpoints

Products are always returned with their cost and margin breakdown, computed
from the settings stored at request time.
"""
import pytest

PRODUCTS = "/api/v1/products"


@pytest.fixture
def product(client, filament):
    """45 minutes of labor, 1.00 in parts and 100g of the default filament"""
    response = client.post(
        PRODUCTS,
        json={
            "name": "Desk Organizer",
            "business": "Cedar & Sail",
            "print_prep_time": 30,
            "post_processing_time": 15,
            "additional_parts_cost": 1.0,
            "filaments": [{"filament_id": filament["id"], "filament_usage_amount": 100}],
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def second_filament(client):
    response = client.post(
        "/api/v1/filaments",
        json={"name": "Silk Gold", "material": "PLA", "color": "Gold", "quantity": 1, "cost": 30},
    )
    assert response.status_code == 201
    return response.json()


class TestProductMargins:
    """Margin fields on product reads"""

    def test_created_product_has_breakdown(self, product, filament):
        assert product["total_cost"] == pytest.approx(18.39)
        assert product["suggested_price"] == pytest.approx(18.39 / 0.38)
        assert product["selling_price"] == pytest.approx(product["suggested_price"])
        assert product["profit_margin"] == pytest.approx(55.0)
        assert product["filament_used"] == pytest.approx(100)
        assert [f["id"] for f in product["filaments"]] == [filament["id"]]
        assert product["filaments"][0]["filament_usage_amount"] == 100

    def test_list_includes_breakdown(self, client, product):
        response = client.get(PRODUCTS)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["labor_cost"] == pytest.approx(15.0)
        assert data[0]["wear_tear_cost"] == pytest.approx(0.09)

    def test_margins_follow_current_settings(self, client, product):
        client.put("/api/v1/settings", json={"hourly_rate": 40})

        response = client.get(f"{PRODUCTS}/{product['id']}")

        assert response.json()["labor_cost"] == pytest.approx(30.0)
        assert response.json()["total_cost"] == pytest.approx(33.39)

    def test_list_price_sets_selling_price(self, client, product):
        body = {
            "name": "Desk Organizer",
            "print_prep_time": 30,
            "post_processing_time": 15,
            "additional_parts_cost": 1.0,
            "list_price": 30,
        }

        response = client.put(f"{PRODUCTS}/{product['id']}", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["selling_price"] == 30
        assert data["platform_fee_amount"] == pytest.approx(2.1)
        assert data["gross_profit"] == pytest.approx(30 - 18.39 - 2.1)

    def test_filament_cost_overrides_spool_price(self, client, filament, second_filament):
        response = client.post(
            PRODUCTS,
            json={
                "name": "Two Tone Vase",
                "filaments": [
                    {"filament_id": filament["id"], "filament_usage_amount": 200},
                    {"filament_id": second_filament["id"], "filament_usage_amount": 50},
                ],
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["filament_used"] == pytest.approx(250)
        assert data["filament_cost"] == pytest.approx(0.2 * 18 + 0.05 * 30)

    def test_legacy_filament_used_without_links(self, client):
        response = client.post(PRODUCTS, json={"name": "Old Product", "filament_used": 500})

        assert response.status_code == 201
        assert response.json()["filament_cost"] == pytest.approx(9.0)
        assert response.json()["filaments"] == []

    def test_unachievable_margin(self, client, product):
        client.put("/api/v1/settings", json={"desired_profit_margin": 95})

        response = client.get(f"{PRODUCTS}/{product['id']}")

        assert response.status_code == 422
        assert response.json()["error"] == "UNACHIEVABLE_MARGIN"
        assert client.get(PRODUCTS).status_code == 422

    def test_unachievable_margin_create_writes_nothing(self, client):
        client.put("/api/v1/settings", json={"desired_profit_margin": 95})

        response = client.post(PRODUCTS, json={"name": "Vase", "list_price": 30})

        assert response.status_code == 422
        assert response.json()["error"] == "UNACHIEVABLE_MARGIN"
        client.put("/api/v1/settings", json={"desired_profit_margin": 55})
        assert client.get(PRODUCTS).json() == []

    def test_unachievable_margin_update_writes_nothing(self, client, product):
        client.put("/api/v1/settings", json={"desired_profit_margin": 95})

        response = client.put(f"{PRODUCTS}/{product['id']}", json={"name": "Renamed", "list_price": 30})

        assert response.status_code == 422
        client.put("/api/v1/settings", json={"desired_profit_margin": 55})
        stored = client.get(f"{PRODUCTS}/{product['id']}").json()
        assert stored["name"] == "Desk Organizer"
        assert stored["list_price"] == 0

    def test_negative_values_rejected(self, client):
        response = client.post(PRODUCTS, json={"name": "Bad", "print_prep_time": -10})

        assert response.status_code == 422

    def test_missing_product(self, client):
        response = client.get(f"{PRODUCTS}/404")

        assert response.status_code == 404
        assert response.json()["message"] == "Product with ID 404 does not exist"


class TestProductLifecycle:
    def test_list_sorted_by_name(self, client):
        for name in ("Zipper Pull", "Arrow Keychain", "Mug Coaster"):
            client.post(PRODUCTS, json={"name": name})

        names = [p["name"] for p in client.get(PRODUCTS).json()]

        assert names == ["Arrow Keychain", "Mug Coaster", "Zipper Pull"]

    def test_unknown_filament_rolls_back_create(self, client):
        response = client.post(
            PRODUCTS,
            json={"name": "Ghost", "filaments": [{"filament_id": 999, "filament_usage_amount": 10}]},
        )

        assert response.status_code == 404
        assert client.get(PRODUCTS).json() == []

    def test_duplicate_filaments_on_create_rejected(self, client, filament):
        entry = {"filament_id": filament["id"], "filament_usage_amount": 10}

        response = client.post(PRODUCTS, json={"name": "Twice", "filaments": [entry, entry]})

        assert response.status_code == 400

    def test_update_keeps_filament_links(self, client, product):
        response = client.put(f"{PRODUCTS}/{product['id']}", json={"name": "Desk Organizer XL"})

        assert response.status_code == 200
        assert response.json()["name"] == "Desk Organizer XL"
        assert len(response.json()["filaments"]) == 1

    def test_delete_product_removes_links_only(self, client, product, filament):
        response = client.delete(f"{PRODUCTS}/{product['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully"}
        assert client.get(f"{PRODUCTS}/{product['id']}").status_code == 404
        assert client.get(f"/api/v1/filaments/{filament['id']}").status_code == 200

    def test_deleting_filament_unlinks_it(self, client, product, filament):
        assert client.delete(f"/api/v1/filaments/{filament['id']}").status_code == 204

        response = client.get(f"{PRODUCTS}/{product['id']}")

        assert response.status_code == 200
        assert response.json()["filaments"] == []


class TestProductFilaments:
    """Product/filament association endpoints"""

    def test_list_product_filaments(self, client, product, filament):
        response = client.get(f"{PRODUCTS}/{product['id']}/filaments")

        assert response.status_code == 200
        assert response.json()[0]["name"] == "Basic Black"

    def test_add_filament(self, client, product, second_filament):
        response = client.post(
            f"{PRODUCTS}/{product['id']}/filaments",
            json={"filament_id": second_filament["id"], "filament_usage_amount": 20},
        )

        assert response.status_code == 201
        assert response.json() == {"message": "Filament added to product successfully"}
        refreshed = client.get(f"{PRODUCTS}/{product['id']}").json()
        assert refreshed["filament_used"] == pytest.approx(120)
        assert [f["name"] for f in refreshed["filaments"]] == ["Basic Black", "Silk Gold"]

    def test_add_same_filament_twice_conflicts(self, client, product, filament):
        response = client.post(
            f"{PRODUCTS}/{product['id']}/filaments",
            json={"filament_id": filament["id"], "filament_usage_amount": 5},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    def test_add_unknown_filament(self, client, product):
        response = client.post(f"{PRODUCTS}/{product['id']}/filaments", json={"filament_id": 999})

        assert response.status_code == 404

    def test_update_usage(self, client, product, filament):
        response = client.patch(
            f"{PRODUCTS}/{product['id']}/filaments/{filament['id']}",
            json={"filament_usage_amount": 300},
        )

        assert response.status_code == 200
        refreshed = client.get(f"{PRODUCTS}/{product['id']}").json()
        assert refreshed["filament_cost"] == pytest.approx(5.4)

    def test_remove_filament(self, client, product, filament):
        response = client.delete(f"{PRODUCTS}/{product['id']}/filaments/{filament['id']}")

        assert response.status_code == 200
        assert client.get(f"{PRODUCTS}/{product['id']}/filaments").json() == []

    def test_remove_unlinked_filament(self, client, product, second_filament):
        response = client.delete(f"{PRODUCTS}/{product['id']}/filaments/{second_filament['id']}")

        assert response.status_code == 404

    def test_heavy_usage_adds_filament_to_purchase_list(self, client, product, filament):
        client.patch(
            f"{PRODUCTS}/{product['id']}/filaments/{filament['id']}",
            json={"filament_usage_amount": 1500},
        )

        items = client.get("/api/v1/purchase-list").json()

        assert len(items) == 1
        assert items[0]["filament_id"] == filament["id"]
        assert items[0]["quantity"] == 3
        assert client.get(f"/api/v1/filaments/{filament['id']}").json()["minimum_quantity"] == 4


class TestPricingPreview:
    def test_preview_uses_stored_settings(self, client, filament):
        response = client.post(
            f"{PRODUCTS}/pricing-preview",
            json={
                "print_prep_time": 30,
                "post_processing_time": 15,
                "additional_parts_cost": 1.0,
                "filaments": [{"filament_id": filament["id"], "filament_usage_amount": 100}],
            },
        )

        assert response.status_code == 200
        assert response.json()["total_cost"] == pytest.approx(18.39)

    def test_preview_with_setting_overrides(self, client):
        response = client.post(
            f"{PRODUCTS}/pricing-preview",
            json={"print_prep_time": 60, "settings": {"hourly_rate": 0, "packaging_cost": 0}},
        )

        assert response.status_code == 200
        assert response.json()["total_cost"] == 0
        assert client.get("/api/v1/settings").json()["hourly_rate"] == 20

    def test_preview_unknown_setting(self, client):
        response = client.post(f"{PRODUCTS}/pricing-preview", json={"settings": {"tax_rate": 8}})

        assert response.status_code == 400

    def test_preview_unachievable_margin(self, client):
        response = client.post(
            f"{PRODUCTS}/pricing-preview",
            json={"settings": {"desired_profit_margin": 90, "platform_fees": 10}},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "UNACHIEVABLE_MARGIN"
