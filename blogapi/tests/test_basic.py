import pytest


@pytest.mark.asyncio
async def test_healthz(client):
    res = await client.get('/healthz')
    assert res.status_code == 200
    assert res.json() == {'status': 'ok'}


@pytest.mark.asyncio
async def test_db_status_connected(client):
    res = await client.get('/api/db-status')
    assert res.status_code == 200
    assert res.json()['status'] == 'connected'


@pytest.mark.asyncio
async def test_db_status_unreachable(broken_client):
    res = await broken_client.get('/api/db-status')
    assert res.status_code == 500
    body = res.json()
    assert body['status'] == 'error'
    assert body['message'] == 'Database connection failed'
    assert 'connection refused' in body['error']
