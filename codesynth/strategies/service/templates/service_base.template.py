"""Entity service base. Regenerated on every run; customize the subclass instead."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any

from prisma import Prisma
from prisma.models import ENTITY
from prisma.types import CREATE_ARGS, DELETE_ARGS, FIND_MANY_ARGS, FIND_ONE_ARGS, UPDATE_ARGS

DELEGATE: Any
CREATE_ARGS_MAPPING: Any
UPDATE_ARGS_MAPPING: Any


class SERVICE_BASE:
    def __init__(self, prisma: Prisma) -> None:
        self.prisma = prisma

    async def find_many(self, args: FIND_MANY_ARGS) -> list[ENTITY]:
        return await self.prisma.DELEGATE.find_many(**args)

    async def find_one(self, args: FIND_ONE_ARGS) -> ENTITY | None:
        return await self.prisma.DELEGATE.find_unique(**args)

    def create(self, args: CREATE_ARGS) -> Awaitable[ENTITY]:  # type: ignore[valid-type]
        return self.prisma.DELEGATE.create(**CREATE_ARGS_MAPPING)

    def update(self, args: UPDATE_ARGS) -> Awaitable[ENTITY | None]:  # type: ignore[valid-type]
        return self.prisma.DELEGATE.update(**UPDATE_ARGS_MAPPING)

    async def delete(self, args: DELETE_ARGS) -> ENTITY | None:
        return await self.prisma.DELEGATE.delete(**args)
