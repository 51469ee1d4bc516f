"""Minimal workflow server that streams demo events to every client.

Run it next to ``stepviz watch`` to see a workflow progress live:

    python guides/workflow_server_example.py
    stepviz watch --output live.svg
"""

import asyncio

from websockets.asyncio.server import serve

from stepviz.simulation import ScriptedWorkflow


async def stream_demo(websocket):
    script = ScriptedWorkflow(step_delay=1.5, pause=1.0)
    for delay, message in script.events():
        await asyncio.sleep(delay)
        await websocket.send(message)
    print("📡 Demo workflow sent")


async def main():
    async with serve(stream_demo, "localhost", 8081) as server:
        print("🚀 Workflow server listening on ws://localhost:8081")
        await server.serve_forever()


if __name__ == "__main__":
    asyncio.run(main())
