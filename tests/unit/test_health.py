import pytest


@pytest.mark.asyncio
@pytest.mark.parametrize("db_up, status, db_status", [(True, "ok", "healthy"), (False, "degraded", "unhealthy")])
async def test_health_reports_database_status(async_client, mocker, db_up, status, db_status):
    mocker.patch(
        "wetask.adapters.api.v1.health.check_database_health",
        new=mocker.AsyncMock(return_value=db_up),
    )

    response = await async_client.get("/api/v1/health")

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == status
    assert body["env"] == "test"
    assert body["version"] == "0.1.0"
    assert body["services"] == {"database": {"status": db_status}}
    assert "timestamp" in body
