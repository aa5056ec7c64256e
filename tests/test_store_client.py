"""Unit tests for StoreClient."""

import httpx
import pytest

from cli.store_client import StoreClient


def make_client(config, handler):
    client = StoreClient(config)
    client.session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')
    return client


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    """Skip retry backoff delays."""
    monkeypatch.setattr('cli.store_client.time.sleep', lambda seconds: None)


def test_upload_success(temp_config, sample_file):
    """Test successful upload reports chunk count and dedup message."""
    seen = {}

    def handler(request):
        seen['path'] = request.url.path
        seen['body'] = request.read()
        seen['request_id'] = request.headers.get('X-Request-ID')
        return httpx.Response(200, json={
            'message': 'Upload stored (new chunks written)',
            'filename': 'test.txt',
            'chunk_count': 1,
            'new_chunks_written': True,
            'signature': 'a' * 64,
        })

    result = make_client(temp_config, handler).upload_files([str(sample_file)])

    assert result == "Stored: test.txt (Size: 26 B, Chunks: 1) - Upload stored (new chunks written)"
    assert seen['path'] == '/upload'
    assert b'name="file"' in seen['body']
    assert b'Sample content for testing' in seen['body']
    assert seen['request_id']


def test_upload_precheck_errors(temp_config, tmp_path):
    """Missing, directory and empty paths are reported without contacting the server."""
    def handler(request):
        raise AssertionError("server should not be contacted")

    empty = tmp_path / 'empty.txt'
    empty.write_bytes(b'')

    result = make_client(temp_config, handler).upload_files(
        [str(tmp_path / 'missing.txt'), str(tmp_path), str(empty)]
    )

    lines = result.splitlines()
    assert lines[0].startswith("Error: File not found:")
    assert lines[1].startswith("Error: Not a file:")
    assert lines[2].startswith("Error: File is empty:")


def test_upload_server_rejection(temp_config, sample_file):
    """Error codes from the server map to readable messages."""
    def handler(request):
        return httpx.Response(413, json={'detail': 'too big', 'code': 'PAYLOAD_TOO_LARGE'})

    result = make_client(temp_config, handler).upload_files([str(sample_file)])

    assert 'File is larger than the server accepts.' in result


def test_upload_retries_server_errors(temp_config, sample_file):
    """5xx responses are retried until one succeeds."""
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(503, json={'detail': 'busy', 'code': 'UNAVAILABLE'})
        return httpx.Response(200, json={
            'message': 'Duplicate content - no chunk rewrite needed',
            'filename': 'test.txt',
            'chunk_count': 1,
            'new_chunks_written': False,
            'signature': 'b' * 64,
        })

    result = make_client(temp_config, handler).upload_files([str(sample_file)])

    assert len(attempts) == 3
    assert 'Duplicate content' in result


def test_upload_connection_failure(temp_config, sample_file):
    """Connection errors are retried then reported."""
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ConnectError("refused", request=request)

    result = make_client(temp_config, handler).upload_files([str(sample_file)])

    assert len(attempts) == temp_config.get_retry_config()['max_retries'] + 1
    assert 'Cannot connect to dedup server' in result


def test_list_files(temp_config):
    def handler(request):
        assert request.url.path == '/list'
        return httpx.Response(200, json=['a.txt', 'b.bin'])

    result = make_client(temp_config, handler).list_files()

    assert result == "Found 2 file(s):\n  - a.txt\n  - b.bin"


def test_list_files_empty(temp_config):
    def handler(request):
        return httpx.Response(200, json=[])

    assert make_client(temp_config, handler).list_files() == "No files stored."


def test_download_writes_file(temp_config, tmp_path):
    """Downloaded bytes land at the requested output path."""
    def handler(request):
        assert request.url.raw_path == b'/download/my%20file.bin'
        return httpx.Response(200, content=b'\x00\x01payload')

    output = tmp_path / 'out' / 'copy.bin'
    result = make_client(temp_config, handler).download('my file.bin', str(output))

    assert output.read_bytes() == b'\x00\x01payload'
    assert result.startswith("Downloaded: my file.bin")
    assert str(output.absolute()) in result


def test_download_into_directory(temp_config, tmp_path):
    """An existing directory as output path keeps the stored filename."""
    def handler(request):
        return httpx.Response(200, content=b'data')

    make_client(temp_config, handler).download('report.pdf', str(tmp_path))

    assert (tmp_path / 'report.pdf').read_bytes() == b'data'


def test_download_default_path_stays_in_downloads(temp_config, tmp_path, monkeypatch):
    """Path components in the requested name never escape the downloads directory."""
    def handler(request):
        return httpx.Response(200, content=b'data')

    workdir = tmp_path / 'work'
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    client = make_client(temp_config, handler)
    client.download('../escape.txt')
    client.download('a/b.txt')
    client.download('dir\\win.txt')

    assert not (tmp_path / 'escape.txt').exists()
    assert sorted(p.name for p in (workdir / 'downloads').iterdir()) == ['b.txt', 'escape.txt', 'win.txt']


def test_download_into_directory_uses_basename(temp_config, tmp_path):
    def handler(request):
        return httpx.Response(200, content=b'data')

    make_client(temp_config, handler).download('nested/report.pdf', str(tmp_path))

    assert (tmp_path / 'report.pdf').read_bytes() == b'data'
    assert not (tmp_path / 'nested').exists()


def test_download_not_found(temp_config, tmp_path):
    def handler(request):
        return httpx.Response(404, json={'detail': 'missing', 'code': 'FILE_NOT_FOUND'})

    result = make_client(temp_config, handler).download('gone.txt', str(tmp_path / 'gone.txt'))

    assert result == "Error: File not found on server."
    assert not (tmp_path / 'gone.txt').exists()


def test_download_corrupt_store(temp_config, tmp_path):
    def handler(request):
        return httpx.Response(500, json={'detail': 'Missing chunk', 'code': 'CORRUPT_STORE'})

    result = make_client(temp_config, handler).download('x.bin', str(tmp_path / 'x.bin'))

    assert 'cannot be reconstructed' in result


def test_format_error_without_json(temp_config):
    client = make_client(temp_config, lambda request: httpx.Response(200))

    assert client._format_error(httpx.Response(503, text='upstream down')) == 'Service unavailable'
