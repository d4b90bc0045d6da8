"""FastAPI application — keeps the process alive, starts the Discord bot and the timer."""

import asyncio
import sys
from typing import Optional

from fastapi import FastAPI
from pydantic import BaseModel

from agent_relay.adapters.agent.letta import LettaAgentClient
from agent_relay.adapters.discord.bot import RelayBot
from agent_relay.config import AppConfig
from agent_relay.domain.timer import RandomEventTimer


def _log(msg: str):
    print(msg, file=sys.stderr)


class StatusResponse(BaseModel):
    status: str
    discordConfigured: bool
    discordConnected: bool
    batching: bool
    timer: bool


def create_app(config: Optional[AppConfig] = None, bot: Optional[RelayBot] = None) -> FastAPI:
    config = config or AppConfig.from_env()
    agent = LettaAgentClient(config.agent)
    if bot is None and config.discord.token:
        bot = RelayBot(config, agent)

    # Without Discord the timer still runs, but has nowhere to deliver
    if bot is not None:
        timer = RandomEventTimer(agent, bot.chat, config.timer, config.discord.channel_id)
    else:
        timer = RandomEventTimer(agent, None, config.timer)

    app = FastAPI(title="Discord Agent Relay")
    app.state.config = config
    app.state.bot = bot
    app.state.timer = timer
    background: set = set()

    @app.get("/", response_model=StatusResponse)
    async def status():
        """Server status endpoint"""
        return StatusResponse(
            status="ok",
            discordConfigured=bot is not None,
            discordConnected=bot is not None and bot.is_ready(),
            batching=config.batch.enabled,
            timer=config.timer.enabled,
        )

    @app.on_event("startup")
    async def startup_event():
        _log(f"Listening on port {config.port}")
        await timer.start()
        if bot is None:
            _log("Discord bot not configured (set DISCORD_TOKEN in .env)")
            return

        async def _start_discord():
            try:
                await bot.start(config.discord.token)
            except Exception as e:
                _log(f"Discord bot failed to start: {e}")

        task = asyncio.create_task(_start_discord())
        background.add(task)
        task.add_done_callback(background.discard)

    @app.on_event("shutdown")
    async def shutdown_event():
        if bot is None:
            return
        # Let timeout drains already talking to the agent finish
        batcher = bot.relay.batcher
        if batcher is not None:
            await batcher.wait_idle()
        if not bot.is_closed():
            await bot.close()

    return app
