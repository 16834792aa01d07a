"""Tests for /api/git routes."""
import pytest


def repo_params(session_id, **extra):
    return {'sessionId': session_id, 'owner': 'alice', 'repo': 'notes', **extra}


class TestStatusEndpoint:
    @pytest.mark.asyncio
    async def test_default_branch_has_no_changes(self, client, session_id, fake):
        r = await client.get('/api/git/status', params=repo_params(session_id))
        assert r.status_code == 200
        data = r.json()
        assert data['currentBranch'] == 'main'
        assert data['defaultBranch'] == 'main'
        assert data['ahead'] == 0
        assert data['behind'] == 0
        assert data['hasChanges'] is False
        assert data['lastCommit']['sha'] == fake.head('alice', 'notes')
        assert data['lastCommit']['message'] == 'Initial commit'

    @pytest.mark.asyncio
    async def test_branch_ahead_and_behind(self, client, session_id, fake):
        fake.add_branch('alice', 'notes', 'feature')
        fake.commit_file('alice', 'notes', 'f1.txt', '1', branch='feature')
        fake.commit_file('alice', 'notes', 'f2.txt', '2', branch='feature', message='Second')
        fake.commit_file('alice', 'notes', 'm.txt', 'm', branch='main')

        r = await client.get('/api/git/status', params=repo_params(session_id, branch='feature'))
        assert r.status_code == 200
        data = r.json()
        assert data['currentBranch'] == 'feature'
        assert data['ahead'] == 2
        assert data['behind'] == 1
        assert data['hasChanges'] is True
        assert data['lastCommit']['message'] == 'Second'
        assert fake.calls_to('GET', '/compare/main...feature')

    @pytest.mark.asyncio
    async def test_unknown_branch_is_404(self, client, session_id):
        r = await client.get('/api/git/status', params=repo_params(session_id, branch='ghost'))
        assert r.status_code == 404


class TestHistoryEndpoint:
    @pytest.mark.asyncio
    async def test_history_newest_first(self, client, session_id, fake):
        fake.commit_file('alice', 'notes', 'a.txt', 'a', message='Add a')
        r = await client.get('/api/git/history', params=repo_params(session_id))
        assert r.status_code == 200
        commits = r.json()['commits']
        assert [c['message'] for c in commits] == ['Add a', 'Initial commit']
        assert commits[0]['author']['login'] == 'alice'

    @pytest.mark.asyncio
    async def test_history_for_path(self, client, session_id, fake):
        fake.commit_file('alice', 'notes', 'a.txt', 'a', message='Add a')
        fake.commit_file('alice', 'notes', 'b.txt', 'b', message='Add b')
        r = await client.get('/api/git/history', params=repo_params(session_id, path='a.txt'))
        assert [c['message'] for c in r.json()['commits']] == ['Add a']
        assert fake.calls_to('GET', '/commits')[-1].params['path'] == 'a.txt'

    @pytest.mark.asyncio
    async def test_history_of_branch(self, client, session_id, fake):
        fake.add_branch('alice', 'notes', 'dev')
        fake.commit_file('alice', 'notes', 'd.txt', 'd', branch='dev', message='On dev')
        r = await client.get('/api/git/history', params=repo_params(session_id, branch='dev'))
        assert r.json()['commits'][0]['message'] == 'On dev'


class TestCommitEndpoint:
    @pytest.mark.asyncio
    async def test_commit_batch(self, client, session_id, fake):
        sha = fake.file_sha('alice', 'notes', 'README.md')
        r = await client.post('/api/git/commit', json=repo_params(
            session_id,
            message='Batch edit',
            files=[
                {'path': 'new.txt', 'operation': 'create', 'content': 'n'},
                {'path': 'new.txt', 'operation': 'update', 'content': 'n2'},
                {'path': 'README.md', 'operation': 'delete', 'sha': sha},
            ],
        ))
        assert r.status_code == 200
        data = r.json()
        assert data['success'] is True
        assert data['completed'] == 3
        assert [res['operation'] for res in data['results']] == ['create', 'update', 'delete']
        assert fake.file_text('alice', 'notes', 'new.txt') == 'n2'
        assert fake.file_bytes('alice', 'notes', 'README.md') is None

    @pytest.mark.asyncio
    async def test_partial_failure_is_200_with_success_false(self, client, session_id, fake):
        r = await client.post('/api/git/commit', json=repo_params(
            session_id,
            message='Batch edit',
            files=[
                {'path': 'ok.txt', 'operation': 'create', 'content': 'ok'},
                {'path': 'README.md', 'operation': 'update', 'content': 'x', 'sha': '0' * 40},
                {'path': 'never.txt', 'operation': 'create', 'content': 'n'},
            ],
        ))
        assert r.status_code == 200
        data = r.json()
        assert data['success'] is False
        assert data['code'] == 'partial_commit_failure'
        assert data['completed'] == 1
        assert data['results'][0]['path'] == 'ok.txt'
        assert data['failure']['path'] == 'README.md'
        assert data['failure']['status'] == 409
        assert data['notAttempted'] == [{'path': 'never.txt', 'operation': 'create'}]
        assert fake.file_text('alice', 'notes', 'ok.txt') == 'ok'
        assert fake.file_bytes('alice', 'notes', 'never.txt') is None

    @pytest.mark.asyncio
    async def test_stale_first_operation_commits_nothing(self, client, session_id, fake):
        r = await client.post('/api/git/commit', json=repo_params(
            session_id,
            message='Batch edit',
            files=[
                {'path': 'README.md', 'operation': 'update', 'content': 'x', 'sha': 'stale'},
                {'path': 'c.txt', 'operation': 'create', 'content': 'c'},
            ],
        ))
        data = r.json()
        assert data['success'] is False
        assert data['completed'] == 0
        assert data['notAttempted'] == [{'path': 'c.txt', 'operation': 'create'}]
        assert fake.calls_to('PUT', 'c.txt') == []

    @pytest.mark.asyncio
    async def test_invalid_batch_is_400(self, client, session_id, fake):
        r = await client.post('/api/git/commit', json=repo_params(
            session_id,
            message='Batch edit',
            files=[{'path': 'a.txt', 'operation': 'move'}],
        ))
        assert r.status_code == 400
        assert r.json()['code'] == 'invalid_request'
        assert fake.calls_to('PUT') == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize('entry', [
        {'path': '../../notes', 'operation': 'delete', 'sha': 'x'},
        {'path': '../../../user/repos', 'operation': 'create', 'content': '{}'},
    ])
    async def test_path_outside_repository_is_400(self, client, session_id, fake, entry):
        r = await client.post('/api/git/commit', json=repo_params(
            session_id, message='Batch edit', files=[entry],
        ))
        assert r.status_code == 400
        assert 'files[0]' in r.json()['details']
        assert fake.calls_to('PUT') == []
        assert fake.calls_to('DELETE') == []

    @pytest.mark.asyncio
    async def test_empty_batch_is_400(self, client, session_id):
        r = await client.post('/api/git/commit', json=repo_params(
            session_id, message='Nothing', files=[],
        ))
        assert r.status_code == 400

    @pytest.mark.asyncio
    async def test_commit_to_branch(self, client, session_id, fake):
        fake.add_branch('alice', 'notes', 'dev')
        r = await client.post('/api/git/commit', json=repo_params(
            session_id,
            message='On dev',
            branch='dev',
            files=[{'path': 'dev.txt', 'operation': 'create', 'content': 'd'}],
        ))
        assert r.json()['branch'] == 'dev'
        assert fake.calls_to('PUT', 'dev.txt')[0].json['branch'] == 'dev'


class TestPullRequests:
    @pytest.mark.asyncio
    async def test_create_and_list(self, client, session_id, fake):
        fake.add_branch('alice', 'notes', 'feature')
        fake.commit_file('alice', 'notes', 'f.txt', 'f', branch='feature')

        r = await client.post('/api/git/pull-request', json=repo_params(
            session_id, title='Add f', head='feature', base='main', body='Please review',
        ))
        assert r.status_code == 200
        pr = r.json()['pullRequest']
        assert pr['number'] == 1
        assert pr['head'] == 'feature'
        assert pr['base'] == 'main'
        assert fake.calls_to('POST', '/pulls')[0].json == {
            'title': 'Add f', 'body': 'Please review', 'head': 'feature', 'base': 'main',
        }

        r = await client.get('/api/git/pull-requests', params=repo_params(session_id))
        assert [p['title'] for p in r.json()['pullRequests']] == ['Add f']

    @pytest.mark.asyncio
    async def test_create_without_commits_is_422(self, client, session_id, fake):
        fake.add_branch('alice', 'notes', 'empty')
        r = await client.post('/api/git/pull-request', json=repo_params(
            session_id, title='Nothing', head='empty', base='main',
        ))
        assert r.status_code == 422
        assert 'No commits between' in r.json()['details']

    @pytest.mark.asyncio
    async def test_create_requires_title(self, client, session_id):
        r = await client.post('/api/git/pull-request', json=repo_params(
            session_id, title='', head='feature', base='main',
        ))
        assert r.status_code == 400

    @pytest.mark.asyncio
    async def test_list_state_closed(self, client, session_id, fake):
        r = await client.get('/api/git/pull-requests', params=repo_params(session_id, state='closed'))
        assert r.status_code == 200
        assert r.json()['state'] == 'closed'
        assert r.json()['pullRequests'] == []

    @pytest.mark.asyncio
    async def test_list_invalid_state(self, client, session_id):
        r = await client.get('/api/git/pull-requests', params=repo_params(session_id, state='merged'))
        assert r.status_code == 400
