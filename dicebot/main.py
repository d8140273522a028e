from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dicebot import models as _models  # noqa: F401 - registers models with Base.metadata
from dicebot.database import Base, engine
from dicebot.routers import events


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield


app = FastAPI(title="Dice Bot", lifespan=lifespan)

app.include_router(events.router)
