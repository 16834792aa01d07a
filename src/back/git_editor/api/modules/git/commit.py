"""Batch commit of single-file mutations.

The hosting API has no multi-file commit through the contents endpoint,
so a batch is executed as one upstream commit per file, strictly in
input order. Execution stops at the first failure. Nothing is rolled
back: operations that already succeeded stay committed, and the outcome
says exactly which ones those were.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from ....observability import get_logger
from ....observability.metrics import COMMIT_OPERATIONS_TOTAL
from ...errors import ApiError, UpstreamApiError, ValidationError
from ...github_client import GitHubClient
from ...schemas import normalize_repo_path

logger = get_logger(__name__)

OPERATIONS = ('create', 'update', 'delete')


@dataclass(frozen=True, slots=True)
class FileOperation:
    """One entry of a commit batch."""

    path: str
    operation: str
    content: str | None = None
    sha: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileOperation:
        return cls(
            path=str(data.get('path') or '').strip().strip('/'),
            operation=str(data.get('operation') or ''),
            content=data.get('content'),
            sha=data.get('sha') or None,
        )

    def describe(self) -> dict[str, str]:
        return {'path': self.path, 'operation': self.operation}


@dataclass(frozen=True, slots=True)
class OperationResult:
    """A file operation that was committed upstream."""

    index: int
    path: str
    operation: str
    sha: str | None
    commit_sha: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            'index': self.index,
            'path': self.path,
            'operation': self.operation,
            'success': True,
            'sha': self.sha,
            'commit': self.commit_sha,
        }


@dataclass(frozen=True, slots=True)
class OperationFailure:
    """The operation that stopped the batch."""

    index: int
    path: str
    operation: str
    error: str
    details: str | None
    status: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            'index': self.index,
            'path': self.path,
            'operation': self.operation,
            'success': False,
            'error': self.error,
            'details': self.details,
            'status': self.status,
        }


@dataclass
class CommitOutcome:
    """Result of a batch: what was committed, what failed, what never ran."""

    message: str
    branch: str | None
    results: list[OperationResult] = field(default_factory=list)
    failure: OperationFailure | None = None
    not_attempted: list[FileOperation] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failure is None

    def summary(self) -> str:
        failure = self.failure
        if failure is None:
            return f'Committed {len(self.results)} file(s)'
        return (
            f'Commit stopped at {failure.operation} {failure.path}: '
            f'{len(self.results)} of '
            f'{len(self.results) + 1 + len(self.not_attempted)} operation(s) committed'
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            'success': self.success,
            'message': self.summary(),
            'commitMessage': self.message,
            'results': [r.to_dict() for r in self.results],
            'completed': len(self.results),
        }
        if self.branch:
            body['branch'] = self.branch
        if self.failure is not None:
            body['failure'] = self.failure.to_dict()
            body['notAttempted'] = [op.describe() for op in self.not_attempted]
        return body


def validate_batch(message: str, operations: list[FileOperation]) -> None:
    """Reject a malformed batch before anything is sent upstream.

    Raises:
        ValidationError: On the first problem found, naming the entry index
    """
    if not message or not message.strip():
        raise ValidationError('Commit message is required')
    if not operations:
        raise ValidationError('No files to commit')

    # Paths whose revision marker will be known from an earlier entry.
    known: set[str] = set()
    for index, op in enumerate(operations):
        where = f'files[{index}]'
        if op.operation not in OPERATIONS:
            raise ValidationError(
                f"Invalid operation '{op.operation}'",
                f"{where}: must be one of {', '.join(OPERATIONS)}",
            )
        if not op.path:
            raise ValidationError('File path is required', f'{where}: path is empty')
        try:
            normalize_repo_path(op.path)
        except ValueError as e:
            raise ValidationError('Invalid file path', f'{where}: {e}')
        if op.operation in ('create', 'update') and op.content is None:
            raise ValidationError(
                f'Content is required for {op.operation}', f'{where}: {op.path}',
            )
        if op.operation in ('update', 'delete') and not op.sha and op.path not in known:
            raise ValidationError(
                f'sha is required for {op.operation}', f'{where}: {op.path}',
            )

        if op.operation == 'delete':
            known.discard(op.path)
        else:
            known.add(op.path)


class CommitOrchestrator:
    """Runs a commit batch against one repository.

    Args:
        client: Upstream client acting with the caller's token
    """

    def __init__(self, client: GitHubClient):
        self.client = client

    async def run(
        self,
        owner: str,
        repo: str,
        message: str,
        files: Iterable[FileOperation | dict[str, Any]],
        branch: str | None = None,
    ) -> CommitOutcome:
        operations = [
            f if isinstance(f, FileOperation) else FileOperation.from_dict(f)
            for f in files
        ]
        validate_batch(message, operations)

        outcome = CommitOutcome(message=message, branch=branch or None)
        # Latest revision marker per path produced within this batch.
        shas: dict[str, str] = {}

        for index, op in enumerate(operations):
            sha = shas.get(op.path, op.sha)
            try:
                result = await self._apply(owner, repo, message, op, sha, outcome.branch)
            except ApiError as e:
                COMMIT_OPERATIONS_TOTAL.labels(operation=op.operation, outcome='failed').inc()
                status = e.status_code if isinstance(e, UpstreamApiError) else None
                outcome.failure = OperationFailure(
                    index=index,
                    path=op.path,
                    operation=op.operation,
                    error=e.message,
                    details=e.details,
                    status=status or e.http_status,
                )
                outcome.not_attempted = operations[index + 1:]
                logger.warning(
                    'commit_stopped',
                    owner=owner,
                    repo=repo,
                    index=index,
                    path=op.path,
                    operation=op.operation,
                    completed=len(outcome.results),
                    not_attempted=len(outcome.not_attempted),
                    error=e.message,
                )
                return outcome

            COMMIT_OPERATIONS_TOTAL.labels(operation=op.operation, outcome='committed').inc()
            content_sha = (result.get('content') or {}).get('sha')
            commit_sha = (result.get('commit') or {}).get('sha')
            if op.operation == 'delete':
                shas.pop(op.path, None)
            elif content_sha:
                shas[op.path] = content_sha
            outcome.results.append(OperationResult(
                index=index,
                path=op.path,
                operation=op.operation,
                sha=content_sha,
                commit_sha=commit_sha,
            ))

        logger.info(
            'commit_completed',
            owner=owner,
            repo=repo,
            files=len(outcome.results),
            branch=outcome.branch,
        )
        return outcome

    async def _apply(
        self,
        owner: str,
        repo: str,
        message: str,
        op: FileOperation,
        sha: str | None,
        branch: str | None,
    ) -> dict[str, Any]:
        if op.operation == 'create':
            return await self.client.create_file(owner, repo, op.path, op.content or '', message, branch)
        if op.operation == 'update':
            return await self.client.update_file(
                owner, repo, op.path, op.content or '', message, sha or '', branch,
            )
        return await self.client.delete_file(owner, repo, op.path, message, sha or '', branch) or {}
