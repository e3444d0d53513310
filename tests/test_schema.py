import pytest

pytestmark = pytest.mark.integration


class TestOpenApiSchema:
    def test_schema_lists_api_routes(self, client):
        response = client.get("/api/schema/", HTTP_ACCEPT="application/vnd.oai.openapi+json")
        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/api/products/" in paths
        assert "/api/orders/{id}/status/" in paths
        assert "/api/orders/customer/{customer_name}/" in paths

    def test_swagger_ui_served(self, client):
        response = client.get("/api/docs/")
        assert response.status_code == 200
