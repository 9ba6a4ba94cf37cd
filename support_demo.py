"""
Support Routing Demo
====================
Streams one user message through the support workflow and prints every step.

Usage:
    python support_demo.py

The message asks which KC certification an AC-powered power tool needs, so
the classifier should route it to certification_support and two assistant
replies are printed: the initial draft and the certification answer.

Set SAVE_GRAPH_PNG=path/to/graph.png to also render the graph (needs network).
"""
import asyncio
import logging
import os

from dotenv import load_dotenv

from certagent import SupportSession, draw_mermaid
from certagent.graph import save_graph_png

THREAD_ID = "certification_test_id"
TEST_MESSAGE = "'교류전원을 사용하는 전동공구' 는 어떤 KC인증을 받아야해??"


async def main():
    session = SupportSession(in_memory=True)
    await session.start()

    try:
        png_path = os.getenv("SAVE_GRAPH_PNG")
        if png_path:
            save_graph_png(session.graph, png_path)
            print(f"MERMAID CODE: \n{draw_mermaid(session.graph)}")

        async for step in session.stream(THREAD_ID, TEST_MESSAGE):
            print("---STEP---")
            print(step)
            print("---END STEP---")
    finally:
        await session.stop()


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    asyncio.run(main())
