"""Credential requests: issue a signed snapshot, validate a presented one."""

from __future__ import annotations

from dataclasses import dataclass

from accessgate.application.dispatcher import Command, Query
from accessgate.application.dtos.identity import Identity, IssuedCredential
from accessgate.application.use_cases.base import Handler


@dataclass(frozen=True)
class IssueCredential(Command):
    user_id: str


@dataclass(frozen=True)
class ValidateCredential(Query):
    token: str


class IssueCredentialHandler(Handler):
    async def handle(self, request: IssueCredential) -> IssuedCredential:
        return await self.ctx.credentials.issue(request.user_id)


class ValidateCredentialHandler(Handler):
    """Returns the embedded snapshot; does not consult the RBAC store."""

    async def handle(self, request: ValidateCredential) -> Identity:
        return self.ctx.credentials.validate(request.token)


HANDLERS: list[tuple[type, type]] = [
    (IssueCredential, IssueCredentialHandler),
    (ValidateCredential, ValidateCredentialHandler),
]
