"""Tests for the HTTP upload/download/list endpoints."""

import pytest
from fastapi.testclient import TestClient

from dedupserver.config import StoreConfig
from dedupserver.main import create_app
from dedupserver.schemas.files import MESSAGE_DUPLICATE, MESSAGE_NEW_CHUNKS


@pytest.fixture
def client(store_config):
    """Create FastAPI test client over a temporary store."""
    with TestClient(create_app(config=store_config)) as client:
        yield client


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "files": 0, "signatures": 0, "chunks": 0}
    assert 'X-Request-ID' in response.headers


def test_upload_then_duplicate(client):
    payload = b"0123456789" * 2 + b"abcde"

    first = client.post('/upload', files={'file': ('sample.bin', payload)})
    assert first.status_code == 200
    body = first.json()
    assert body['message'] == MESSAGE_NEW_CHUNKS
    assert body['filename'] == 'sample.bin'
    assert body['chunk_count'] == 3
    assert body['new_chunks_written'] is True

    second = client.post('/upload', files={'file': ('sample.bin', payload)})
    assert second.status_code == 200
    assert second.json()['message'] == MESSAGE_DUPLICATE
    assert second.json()['new_chunks_written'] is False
    assert second.json()['signature'] == body['signature']


def test_health_counts_unique_chunks(client):
    client.post('/upload', files={'file': ('a.bin', b'0123456789' * 3)})
    client.post('/upload', files={'file': ('b.bin', b'0123456789abcdefghij')})

    assert client.get('/health').json() == {
        "status": "healthy", "files": 2, "signatures": 2, "chunks": 2,
    }


def test_legacy_field_name_accepted(client):
    response = client.post('/upload', files={'pdfFile': ('old.pdf', b'%PDF-1.4 legacy')})

    assert response.status_code == 200
    assert response.json()['filename'] == 'old.pdf'


def test_upload_without_file(client):
    response = client.post('/upload', data={'other': 'value'})

    assert response.status_code == 400
    assert response.json()['code'] == 'INVALID_INPUT'


def test_upload_empty_file(client):
    response = client.post('/upload', files={'file': ('empty.txt', b'')})

    assert response.status_code == 400
    assert response.json()['code'] == 'INVALID_INPUT'


def test_upload_filename_too_long(client):
    response = client.post('/upload', files={'file': ('n' * 300 + '.txt', b'contents')})

    assert response.status_code == 400
    assert response.json()['code'] == 'INVALID_INPUT'


def test_upload_path_is_sanitized(client):
    response = client.post('/upload', files={'file': ('../../secret.txt', b'contents')})

    assert response.status_code == 200
    assert response.json()['filename'] == 'secret.txt'


def test_upload_too_large(tmp_path):
    config = StoreConfig.for_data_dir(tmp_path / 'small', chunk_size=4, max_upload_bytes=8)
    with TestClient(create_app(config=config)) as client:
        response = client.post('/upload', files={'file': ('big.bin', b'x' * 9)})
        ok = client.post('/upload', files={'file': ('fits.bin', b'x' * 8)})

    assert response.status_code == 413
    assert response.json()['code'] == 'PAYLOAD_TOO_LARGE'
    assert ok.status_code == 200


def test_download_round_trip(client):
    payload = bytes(range(256)) * 3
    client.post('/upload', files={'file': ('data.bin', payload)})

    response = client.get('/download/data.bin')

    assert response.status_code == 200
    assert response.content == payload
    assert response.headers['content-disposition'] == 'attachment; filename="data.bin"'
    assert response.headers['content-type'] == 'application/octet-stream'


def test_download_guesses_content_type(client):
    client.post('/upload', files={'file': ('report.pdf', b'%PDF-1.7 body')})

    response = client.get('/download/report.pdf')

    assert response.headers['content-type'] == 'application/pdf'


def test_download_unknown(client):
    response = client.get('/download/nope.txt')

    assert response.status_code == 404
    assert response.json()['code'] == 'FILE_NOT_FOUND'


def test_download_missing_chunk(client, store_config):
    client.post('/upload', files={'file': ('gone.bin', b'0123456789abcdefghij')})
    for blob in store_config.chunks_dir.iterdir():
        blob.unlink()

    response = client.get('/download/gone.bin')

    assert response.status_code == 500
    assert response.json()['code'] == 'CORRUPT_STORE'


def test_list(client):
    assert client.get('/list').json() == []

    client.post('/upload', files={'file': ('b.txt', b'bbb')})
    client.post('/upload', files={'file': ('a.txt', b'aaa')})
    client.post('/upload', files={'file': ('b.txt', b'bbb again')})

    assert client.get('/list').json() == ['a.txt', 'b.txt']


def test_state_survives_app_restart(store_config):
    with TestClient(create_app(config=store_config)) as client:
        client.post('/upload', files={'file': ('keep.txt', b'persist me please')})

    with TestClient(create_app(config=store_config)) as client:
        assert client.get('/list').json() == ['keep.txt']
        assert client.get('/download/keep.txt').content == b'persist me please'
        assert client.get('/health').json()['files'] == 1


def test_request_id_echoed(client):
    response = client.get('/list', headers={'X-Request-ID': 'req-123'})

    assert response.headers['X-Request-ID'] == 'req-123'
