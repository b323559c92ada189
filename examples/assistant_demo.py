"""Minimal demonstration of the AI gateway (needs GEMINI_API_KEY)."""

import asyncio

from assistant_core import create_gateway
from assistant_core.api.service import ask_chatbot, research
from assistant_core.domain.models import ChatMessage, InteractionMode, Location


async def main() -> None:
    gateway = create_gateway()
    try:
        question = "Explain photosynthesis to a 10-year-old in three sentences."
        reply = await ask_chatbot([], question, InteractionMode.FAST, gateway=gateway)
        print("User:", question)
        print("Assistant:", reply)

        history = [ChatMessage(sender="user", text=question), ChatMessage(sender="bot", text=reply)]
        follow_up = await ask_chatbot(history, "Now give one quiz question about it.", gateway=gateway)
        print("Assistant:", follow_up)

        result = await research(
            "Science museums suitable for a class trip",
            use_maps=True,
            location=Location(latitude=37.7749, longitude=-122.4194),
            gateway=gateway,
        )
        print(result["text"])
        for source in result["sources"]:
            print(f"- [{source['kind']}] {source['title']} {source['uri']}")
    finally:
        await gateway.aclose()


if __name__ == "__main__":
    asyncio.run(main())
