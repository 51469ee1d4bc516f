"""Drive a visualization through the in-memory transport."""

import asyncio

from stepviz import WorkflowVisualization, load_config
from stepviz.contracts import Step, StepCompleteEvent, StepStartEvent, WorkflowInitEvent
from stepviz.scene import SvgScene
from stepviz.transports import InMemoryTransport


async def main():
    transport = InMemoryTransport()
    scene = SvgScene(output_path="inmemory_example.svg")
    viz = WorkflowVisualization(transport, scene, config=load_config())
    viz.start()

    steps = [
        Step(id="extract", name="Extract", description="Pull raw records"),
        Step(id="clean", name="Clean", description="Drop malformed rows"),
        Step(id="load", name="Load", description="Write to the warehouse"),
    ]
    transport.feed(WorkflowInitEvent(steps=steps).to_json())
    for step in steps:
        transport.feed(StepStartEvent(step_id=step.id).to_json())
        await asyncio.sleep(0.5)
        transport.feed(StepCompleteEvent(step_id=step.id, data={"ok": True}).to_json())
        await asyncio.sleep(0.5)

    print(f"✅ {viz.progress().text}")
    print(f"🖼️  Snapshot written to {scene.output_path}")
    await viz.stop()


if __name__ == "__main__":
    asyncio.run(main())
