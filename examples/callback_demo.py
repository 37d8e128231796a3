"""dynframe callback demo — error handlers and bindings across the event loop.

Run with: uv run python examples/callback_demo.py

A request handler schedules work on the loop with ``call_later``. Without
frames the failure would land in asyncio's default exception handler; with
frames it reaches the handler installed around the request, and the
``request_id`` binding is still in effect when the timer fires.
"""

import asyncio

from dynframe import current_error, frame, log_trace

request_id = None


def lookup_inventory(item):
    print(f"[{request_id}] looking up {item}")
    if item == "widget":
        raise LookupError(f"no inventory record for {item!r}")


def handle_request(loop, rid, item, done):
    def start():
        global request_id
        request_id = rid
        loop.call_later(0.05, frame(lookup_inventory, name=f"lookup {item}"), item)
        loop.call_later(0.1, frame(done.set))

    def on_error(trace):
        print(f"request {rid} failed: {current_error()!r}")
        print(trace)

    frame(
        start,
        name=f"request {rid}",
        on_error=on_error,
        bindings=[f"{__name__}.request_id"],
    )()


async def main():
    loop = asyncio.get_running_loop()
    events = [asyncio.Event(), asyncio.Event()]

    handle_request(loop, "r-1", "gadget", events[0])
    handle_request(loop, "r-2", "widget", events[1])

    # A frame without a custom handler can still log through loguru.
    frame(lambda: 1 / 0, name="fire and forget", on_error=log_trace("WARNING"))()

    await asyncio.gather(*(event.wait() for event in events))
    print(f"request_id outside any frame: {request_id}")


if __name__ == "__main__":
    asyncio.run(main())
