"""Entity service. Generated once; customize freely."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prisma import Prisma

if TYPE_CHECKING:

    class SERVICE_BASE:
        def __init__(self, prisma: Prisma) -> None: ...


class SERVICE(SERVICE_BASE):
    def __init__(self, prisma: Prisma) -> None:
        super().__init__(prisma)
