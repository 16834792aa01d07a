"""Tests for git_editor.api.github_client against the fake upstream."""
import base64

import httpx
import pytest

from git_editor.api.errors import (
    UpstreamApiError,
    UpstreamAuthError,
    UpstreamConflictError,
    UpstreamNotFoundError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
    UpstreamTransportError,
    UpstreamValidationError,
    ValidationError,
)
from git_editor.api.github_client import GitHubClient, decode_content, encode_content
from git_editor.api.testing import blob_sha


@pytest.fixture
def gh(upstream, api_url, token):
    return GitHubClient(token, base_url=api_url, http_client=upstream, user_agent='tests')


class TestContentCodec:
    @pytest.mark.parametrize('text', ['', 'plain ascii\n', 'héllo wörld ✓\n', '日本語\r\n'])
    def test_round_trip(self, text):
        assert decode_content(encode_content(text)) == text

    def test_decode_ignores_line_wrapping(self):
        encoded = base64.b64encode(b'x' * 100).decode()
        wrapped = '\n'.join(encoded[i:i + 60] for i in range(0, len(encoded), 60))
        assert decode_content(wrapped) == 'x' * 100

    def test_decode_rejects_binary(self):
        with pytest.raises(ValidationError):
            decode_content(base64.b64encode(b'\xff\xfe\x00').decode())


class TestClientBasics:
    def test_requires_token(self):
        with pytest.raises(ValueError):
            GitHubClient('')

    def test_repr_hides_token(self, gh, token):
        assert token not in repr(gh)

    @pytest.mark.asyncio
    async def test_sends_auth_accept_and_user_agent(self, gh, fake, token):
        await gh.get_user()
        headers = fake.calls[-1].headers
        assert headers['authorization'] == f'token {token}'
        assert headers['accept'] == 'application/vnd.github.v3+json'
        assert headers['user-agent'] == 'tests'

    @pytest.mark.asyncio
    async def test_owns_client_when_none_given(self, api_url, token):
        client = GitHubClient(token, base_url=api_url)
        await client.aclose()
        assert client._client.is_closed

    @pytest.mark.asyncio
    async def test_leaves_shared_client_open(self, gh, upstream):
        await gh.aclose()
        assert not upstream.is_closed


class TestClientOperations:
    @pytest.mark.asyncio
    async def test_get_user(self, gh):
        user = await gh.get_user()
        assert user['login'] == 'alice'

    @pytest.mark.asyncio
    async def test_get_file_decodes_content(self, gh, fake):
        data = await gh.get_file('alice', 'notes', 'src/app.py')
        assert data['decoded_content'] == "print('hello')\n"
        assert data['sha'] == fake.file_sha('alice', 'notes', 'src/app.py')

    @pytest.mark.asyncio
    async def test_get_file_on_directory_is_validation_error(self, gh):
        with pytest.raises(ValidationError):
            await gh.get_file('alice', 'notes', 'src')

    @pytest.mark.asyncio
    async def test_update_round_trips_unicode(self, gh, fake):
        sha = fake.file_sha('alice', 'notes', 'README.md')
        text = '# notes ✓ ünïcode\n'
        result = await gh.update_file('alice', 'notes', 'README.md', text, 'edit', sha)
        assert result['content']['sha'] == blob_sha(text.encode('utf-8'))
        assert (await gh.get_file('alice', 'notes', 'README.md'))['decoded_content'] == text

    @pytest.mark.asyncio
    async def test_create_file_sends_no_sha(self, gh, fake):
        await gh.create_file('alice', 'notes', 'new.txt', 'hi', 'add')
        assert 'sha' not in fake.calls_to('PUT', 'new.txt')[0].json

    @pytest.mark.asyncio
    async def test_branch_omitted_when_not_given(self, gh, fake):
        await gh.create_file('alice', 'notes', 'a.txt', 'hi', 'add')
        await gh.create_file('alice', 'notes', 'b.txt', 'hi', 'add', branch='main')
        assert 'branch' not in fake.calls_to('PUT', 'a.txt')[0].json
        assert fake.calls_to('PUT', 'b.txt')[0].json['branch'] == 'main'

    @pytest.mark.asyncio
    async def test_delete_file_sends_json_body(self, gh, fake):
        sha = fake.file_sha('alice', 'notes', 'README.md')
        await gh.delete_file('alice', 'notes', 'README.md', 'remove', sha)
        call = fake.calls_to('DELETE')[0]
        assert call.json == {'message': 'remove', 'sha': sha}
        assert fake.file_bytes('alice', 'notes', 'README.md') is None

    @pytest.mark.asyncio
    async def test_create_branch_points_at_source_head(self, gh, fake):
        head = fake.head('alice', 'notes')
        ref = await gh.create_branch('alice', 'notes', 'feature-x', 'main')
        assert ref['object']['sha'] == head
        assert fake.head('alice', 'notes', 'feature-x') == head

    @pytest.mark.asyncio
    async def test_branch_with_slash(self, gh, fake):
        await gh.create_branch('alice', 'notes', 'feature/deep', 'main')
        info = await gh.get_branch('alice', 'notes', 'feature/deep')
        assert info['name'] == 'feature/deep'

    @pytest.mark.asyncio
    async def test_list_commits_omits_sha_without_branch(self, gh, fake):
        await gh.list_commits('alice', 'notes')
        assert 'sha' not in fake.calls_to('GET', '/commits')[0].params

    @pytest.mark.asyncio
    async def test_compare(self, gh, fake):
        fake.add_branch('alice', 'notes', 'dev')
        fake.commit_file('alice', 'notes', 'x.txt', 'x', branch='dev')
        result = await gh.compare('alice', 'notes', 'main', 'dev')
        assert result['ahead_by'] == 1
        assert result['behind_by'] == 0

    @pytest.mark.asyncio
    async def test_search_scopes_to_repository(self, gh, fake):
        result = await gh.search_code('alice', 'notes', 'helper')
        assert fake.calls[-1].params['q'] == 'helper repo:alice/notes'
        assert [i['path'] for i in result['items']] == ['src/util/helpers.py']

    @pytest.mark.asyncio
    @pytest.mark.parametrize('path', ['../../../user/repos', 'docs/./a.md', 'a//b'])
    async def test_contents_path_cannot_leave_repository(self, gh, fake, path):
        with pytest.raises(ValidationError):
            await gh.create_file('alice', 'notes', path, 'x', 'msg')
        with pytest.raises(ValidationError):
            await gh.get_contents('alice', 'notes', path)
        assert fake.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize('owner,repo', [('..', 'user'), ('alice', '.'), ('', 'notes')])
    async def test_owner_and_repo_segments_checked(self, gh, fake, owner, repo):
        with pytest.raises(ValidationError):
            await gh.list_branches(owner, repo)
        assert fake.calls == []

    @pytest.mark.asyncio
    async def test_root_listing_still_allowed(self, gh):
        entries = await gh.get_contents('alice', 'notes', '')
        assert {e['name'] for e in entries} == {'README.md', 'src'}

    @pytest.mark.asyncio
    async def test_list_pull_requests_rejects_bad_state(self, gh, fake):
        with pytest.raises(ValidationError):
            await gh.list_pull_requests('alice', 'notes', 'merged')
        assert fake.calls == []


class TestErrorMapping:
    @pytest.mark.asyncio
    async def test_bad_token_is_auth_error(self, upstream, api_url):
        gh = GitHubClient('wrong', base_url=api_url, http_client=upstream)
        with pytest.raises(UpstreamAuthError) as exc:
            await gh.get_user()
        assert exc.value.status_code == 401
        assert exc.value.http_status == 401
        assert exc.value.upstream_message == 'Bad credentials'

    @pytest.mark.asyncio
    async def test_forbidden_is_auth_error_403(self, gh, fake):
        fake.inject('GET', '/user', status=403, body={'message': 'Resource not accessible'})
        with pytest.raises(UpstreamAuthError) as exc:
            await gh.get_user()
        assert exc.value.http_status == 403

    @pytest.mark.asyncio
    async def test_not_found(self, gh):
        with pytest.raises(UpstreamNotFoundError) as exc:
            await gh.get_file('alice', 'notes', 'missing.txt')
        assert exc.value.message == 'Failed to get file content'

    @pytest.mark.asyncio
    async def test_stale_sha_is_conflict(self, gh):
        with pytest.raises(UpstreamConflictError):
            await gh.update_file('alice', 'notes', 'README.md', 'x', 'edit', 'f' * 40)

    @pytest.mark.asyncio
    async def test_unprocessable_includes_field_errors(self, gh):
        with pytest.raises(UpstreamValidationError) as exc:
            await gh.create_repo('notes')
        assert 'name already exists' in exc.value.upstream_message

    @pytest.mark.asyncio
    async def test_rate_limit_from_403(self, gh, fake):
        fake.inject(
            'GET', '/user', status=403,
            body={'message': 'API rate limit exceeded'},
            headers={'x-ratelimit-remaining': '0', 'x-ratelimit-reset': '1700000000'},
        )
        with pytest.raises(UpstreamRateLimitError) as exc:
            await gh.get_user()
        assert exc.value.reset_at == 1700000000

    @pytest.mark.asyncio
    async def test_rate_limit_from_429(self, gh, fake):
        fake.inject('GET', '/user', status=429)
        with pytest.raises(UpstreamRateLimitError) as exc:
            await gh.get_user()
        assert exc.value.reset_at is None

    @pytest.mark.asyncio
    async def test_server_error_is_generic_upstream_error(self, gh, fake):
        fake.inject('GET', '/user', status=502, body={'message': 'Bad gateway'})
        with pytest.raises(UpstreamApiError) as exc:
            await gh.get_user()
        assert type(exc.value) is UpstreamApiError
        assert exc.value.status_code == 502

    @pytest.mark.asyncio
    async def test_timeout(self, gh, fake):
        fake.inject('GET', '/user', exception=httpx.ReadTimeout('slow'))
        with pytest.raises(UpstreamTimeoutError):
            await gh.get_user()

    @pytest.mark.asyncio
    async def test_transport_failure(self, gh, fake):
        fake.inject('GET', '/user', exception=httpx.ConnectError('refused'))
        with pytest.raises(UpstreamTransportError) as exc:
            await gh.get_user()
        assert exc.value.http_status == 502

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, api_url, token):
        def handler(request):
            return httpx.Response(500, text='<html>oops</html>')

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            gh = GitHubClient(token, base_url=api_url, http_client=http)
            with pytest.raises(UpstreamApiError) as exc:
                await gh.get_user()
        assert exc.value.upstream_message == '<html>oops</html>'
