from __future__ import annotations

import asyncio

from speakup.pipelines.turn import CandidateLocks


def test_same_candidate_runs_one_at_a_time_and_registry_empties():
    locks = CandidateLocks()
    order: list[str] = []

    async def worker(name: str, user_id: int) -> None:
        async with locks.hold(user_id):
            order.append(f"{name}:start")
            await asyncio.sleep(0.01)
            order.append(f"{name}:end")

    async def main() -> None:
        await asyncio.gather(worker("a", 1), worker("b", 1))

    asyncio.run(main())

    assert order == ["a:start", "a:end", "b:start", "b:end"]
    assert len(locks) == 0


def test_different_candidates_do_not_block_each_other():
    locks = CandidateLocks()
    active = 0
    peak = 0

    async def worker(user_id: int) -> None:
        nonlocal active, peak
        async with locks.hold(user_id):
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

    async def main() -> None:
        await asyncio.gather(worker(1), worker(2), worker(3))

    asyncio.run(main())

    assert peak == 3
