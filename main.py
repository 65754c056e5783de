"""
Entry point for the DASH arcade game.

Desktop: ``python main.py``. Browser: ``pygbag .`` packages this file and
runs `async_main` inside the page's event loop.
"""

import asyncio

import env
from arcade_app import ArcadeSession
from dash_game import DashGame


def main():
    """Run the game in a desktop window until it is closed."""
    env.configure_logging()
    ArcadeSession(DashGame()).run()


async def async_main():
    """Async entrypoint for pygbag/web."""
    env.configure_logging()
    session = ArcadeSession(DashGame())
    await session.run_async()


if __name__ == "__main__":
    if env.is_browser:
        asyncio.run(async_main())
    else:
        main()
